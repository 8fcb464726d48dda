"""Shared fixtures for the jobretry test suite."""

from unittest.mock import MagicMock

import pytest

from jobretry.models import JobOccurrence
from jobretry.storage import AttemptStore, MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def attempts(store):
    return AttemptStore(store)


@pytest.fixture
def scheduler():
    return MagicMock(name="scheduler")


@pytest.fixture
def queue():
    return MagicMock(name="queue")


@pytest.fixture
def status():
    tracker = MagicMock(name="status")
    tracker.is_tracking.return_value = False
    return tracker


@pytest.fixture
def make_occurrence():
    """Build occurrences of one logical job, sharing a payload id."""
    def factory(instance=None, job_class="SendEmail", payload_id="3f2a", arguments=None):
        return JobOccurrence(
            queue="mail",
            job_class=job_class,
            payload_id=payload_id,
            arguments=arguments if arguments is not None else [{"to": "ops@example.com"}],
            instance=instance,
        )
    return factory
