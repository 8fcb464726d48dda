"""Attempt counters kept in a shared key-value store."""

import threading
from typing import Dict, Optional

from redis import Redis

from .models import JobOccurrence


def retry_key(occurrence: JobOccurrence) -> str:
    """Key of the attempt counter for a job occurrence.

    Stable across retries that share the same payload id.
    """
    name = [
        "Job{" + occurrence.queue + "}",
        occurrence.job_class,
        occurrence.payload_id,
    ]
    return "retry:(" + " | ".join(name) + ")"


class RedisStore:
    """Key-value store backed by Redis."""

    def __init__(self, client: Redis, prefix: str = "resque:"):
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def set_if_absent(self, key: str, value: int) -> bool:
        return bool(self.client.setnx(self._key(key), value))

    def increment(self, key: str) -> int:
        return int(self.client.incr(self._key(key)))

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode()
        return value

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))


class MemoryStore:
    """Process-local key-value store for tests and single-process runs."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def set_if_absent(self, key: str, value: int) -> bool:
        with self._lock:
            if key in self._data:
                return False
            self._data[key] = str(value)
            return True

    def increment(self, key: str) -> int:
        with self._lock:
            value = int(self._data.get(key, "0")) + 1
            self._data[key] = str(value)
            return value

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class AttemptStore:
    """Zero-based count of prior failures per job occurrence."""

    def __init__(self, store):
        self.store = store

    def record_attempt(self, key: str) -> int:
        """Create the counter at -1 if absent, then increment it."""
        self.store.set_if_absent(key, -1)
        return self.store.increment(key)

    def read_attempt(self, key: str) -> Optional[int]:
        """Read the counter without changing it."""
        value = self.store.get(key)
        if value is None:
            return None
        return int(value)

    def clear(self, key: str) -> None:
        """Drop the counter. No error if it does not exist."""
        self.store.delete(key)
