"""Data models for job occurrences and retry outcomes."""

from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field


class RetryState(str, Enum):
    """Retry lifecycle states of a job occurrence."""
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RETRY_SCHEDULED = "retry_scheduled"
    EXHAUSTED = "exhausted"


class FailureOutcome(str, Enum):
    """Result of running the failure hooks for an occurrence."""
    UNHANDLED = "unhandled"
    HANDLED = "handled"
    RETRYING = "retrying"

    @property
    def is_retrying(self) -> bool:
        return self is FailureOutcome.RETRYING


class JobOccurrence(BaseModel):
    """One concrete attempt to run a job."""
    queue: str
    job_class: str
    payload_id: str
    arguments: List[Any] = Field(default_factory=list)

    # Retry tracking, written by the retry plugin
    attempt_number: Optional[int] = None
    is_retrying: bool = False
    retry_delay: Optional[int] = None
    retry_at: Optional[int] = None
    retry_key: Optional[str] = None
    state: RetryState = RetryState.RUNNING

    instance: Optional[Any] = Field(default=None, exclude=True)
    worker: Optional[str] = None

    class Config:
        use_enum_values = False
        arbitrary_types_allowed = True

    def payload(self) -> dict:
        """Queue payload for this occurrence."""
        return {
            "class": self.job_class,
            "args": list(self.arguments),
            "id": self.payload_id,
            "queue": self.queue,
        }

    @classmethod
    def from_payload(cls, queue: str, payload: dict) -> "JobOccurrence":
        """Build an occurrence from a dequeued payload."""
        return cls(
            queue=queue,
            job_class=payload["class"],
            payload_id=payload["id"],
            arguments=list(payload.get("args") or []),
        )

    def __str__(self) -> str:
        return f"(Job{{{self.queue}}} | ID: {self.payload_id} | {self.job_class})"
