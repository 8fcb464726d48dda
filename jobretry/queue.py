"""Redis collaborators: job queue, delayed scheduler, status and failures.

Keys follow the Resque and resque-scheduler layout so workers written for
those tools can share the same Redis.
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, List, Optional

from redis import Redis

from .models import JobOccurrence

logger = logging.getLogger(__name__)


class RedisJobQueue:
    """Push and pop job payloads on Redis lists."""

    def __init__(self, client: Redis, prefix: str = "resque:"):
        self.client = client
        self.prefix = prefix

    def push(self, queue: str, item: dict) -> None:
        """Add a payload to the end of a queue."""
        self.client.sadd(f"{self.prefix}queues", queue)
        self.client.rpush(f"{self.prefix}queue:{queue}", json.dumps(item))

    def recreate(self, occurrence: JobOccurrence) -> None:
        """Queue the occurrence again with the same payload id."""
        self.push(occurrence.queue, occurrence.payload())

    def pop(self, queue: str) -> Optional[JobOccurrence]:
        """Take the next payload off a queue, if any."""
        raw = self.client.lpop(f"{self.prefix}queue:{queue}")
        if raw is None:
            return None
        return JobOccurrence.from_payload(queue, json.loads(raw))


class RedisStatusTracker:
    """Whether a job payload has progress tracking enabled."""

    def __init__(self, client: Redis, prefix: str = "resque:"):
        self.client = client
        self.prefix = prefix

    def is_tracking(self, payload_id: str) -> bool:
        return bool(self.client.exists(f"{self.prefix}job:{payload_id}:status"))


class RedisScheduler:
    """Enqueue jobs to run at a future unix timestamp."""

    def __init__(self, client: Redis, prefix: str = "resque:"):
        self.client = client
        self.prefix = prefix

    def enqueue_at(
        self,
        timestamp: int,
        queue: str,
        job_class: str,
        arguments: List[Any],
        track_status: bool = False,
        payload_id: Optional[str] = None,
    ) -> None:
        item = {
            "class": job_class,
            "args": list(arguments),
            "queue": queue,
        }
        if track_status:
            item["trackStatus"] = True
        if payload_id is not None:
            item["id"] = payload_id

        timestamp = int(timestamp)
        self.client.rpush(f"{self.prefix}delayed:{timestamp}", json.dumps(item))
        self.client.zadd(f"{self.prefix}delayed_queue_schedule", {str(timestamp): timestamp})
        logger.debug("Scheduled %s on %s at %d", job_class, queue, timestamp)


class RedisFailureBackend:
    """Record terminal job failures."""

    def __init__(self, client: Redis, prefix: str = "resque:"):
        self.client = client
        self.prefix = prefix

    def save(self, cause: BaseException, occurrence: JobOccurrence) -> dict:
        record = {
            "failed_at": datetime.now(timezone.utc).isoformat(),
            "payload": occurrence.payload(),
            "exception": type(cause).__name__,
            "error": str(cause),
            "backtrace": traceback.format_exception(type(cause), cause, cause.__traceback__),
            "worker": occurrence.worker,
            "queue": occurrence.queue,
            "attempts": occurrence.attempt_number,
        }
        self.client.rpush(f"{self.prefix}failed", json.dumps(record, default=str))
        return record
