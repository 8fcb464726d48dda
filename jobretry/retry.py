"""Retry plugins: decide whether and when a failed job runs again."""

import logging
import time
from typing import Any, Callable, Optional

from .backoff import DEFAULT_BACKOFF_STRATEGY, fixed_delay, normalize_strategy, staged_delay
from .config import get_instance_property
from .models import FailureOutcome, JobOccurrence, RetryState
from .storage import AttemptStore, retry_key

logger = logging.getLogger(__name__)


class Retry:
    """Retry failed jobs after a fixed delay.

    Job classes tune it with ``retry_limit`` (default 1, 0 never retries,
    negative retries forever), ``retry_delay`` (seconds, default 0) and
    ``retry_exceptions`` (exception classes or names; retry any failure when
    unset).
    """

    default_retry_limit = 1

    def __init__(
        self,
        attempts: AttemptStore,
        scheduler,
        queue,
        status=None,
        clock: Callable[[], float] = time.time,
        max_delay: Optional[int] = None,
    ):
        self.attempts = attempts
        self.scheduler = scheduler
        self.queue = queue
        self.status = status
        self.clock = clock
        self.max_delay = max_delay

    # Hooks

    def before_perform(self, occurrence: JobOccurrence, instance: Any = None) -> None:
        """Count this attempt before any job code runs."""
        key = retry_key(occurrence)
        occurrence.attempt_number = self.attempts.record_attempt(key)
        occurrence.retry_key = key
        occurrence.state = RetryState.RUNNING

    def after_perform(self, occurrence: JobOccurrence, instance: Any = None) -> None:
        """The job succeeded, forget its failures."""
        self.attempts.clear(retry_key(occurrence))
        occurrence.state = RetryState.SUCCEEDED

    def on_failure(self, cause: BaseException, occurrence: JobOccurrence, instance: Any = None) -> FailureOutcome:
        """Schedule another attempt if the retry criteria pass."""
        occurrence.state = RetryState.FAILED
        occurrence.retry_key = retry_key(occurrence)

        if not self.retry_criteria_valid(cause, occurrence):
            # attempt_number stays on the occurrence for failure reporting
            self.attempts.clear(occurrence.retry_key)
            occurrence.state = RetryState.EXHAUSTED
            logger.warning(
                "Not retrying job %s after attempt %s: %s",
                occurrence, occurrence.attempt_number, type(cause).__name__,
            )
            return FailureOutcome.UNHANDLED

        self.try_again(cause, occurrence)
        occurrence.state = RetryState.RETRY_SCHEDULED
        return FailureOutcome.RETRYING

    # Retry criteria

    def retry_criteria_valid(self, cause: BaseException, occurrence: JobOccurrence) -> bool:
        if self.retry_limit_reached(occurrence):
            return False
        return self.retry_exception(cause, occurrence)

    def retry_limit_reached(self, occurrence: JobOccurrence) -> bool:
        limit = int(self.retry_limit(occurrence))
        if limit == 0:
            return True
        if limit < 0:
            return False

        if occurrence.attempt_number is None:
            stored = self.attempts.read_attempt(retry_key(occurrence))
            occurrence.attempt_number = stored if stored is not None else 0
        return occurrence.attempt_number >= limit

    def retry_exception(self, cause: BaseException, occurrence: JobOccurrence) -> bool:
        """Whether the cause is one of the configured retry exceptions."""
        exceptions = self.retry_exceptions(occurrence)
        if not exceptions:
            return True

        for expected in exceptions:
            if _exception_matches(cause, expected):
                return True
        return False

    # Configuration

    def retry_limit(self, occurrence: JobOccurrence) -> int:
        return get_instance_property(occurrence, "retry_limit", self.default_retry_limit)

    def retry_delay(self, occurrence: JobOccurrence) -> int:
        return fixed_delay(get_instance_property(occurrence, "retry_delay", 0))

    def retry_exceptions(self, occurrence: JobOccurrence):
        return get_instance_property(occurrence, "retry_exceptions", None)

    # Rescheduling

    def try_again(self, cause: BaseException, occurrence: JobOccurrence) -> None:
        """Run the job again now, or hand it to the scheduler."""
        delay = self.retry_delay(occurrence)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        retry_at = int(self.clock()) + delay

        if delay <= 0:
            logger.info("Re-running failed job immediately: %s", occurrence)
            self.queue.recreate(occurrence)
        else:
            logger.info("Re-running failed job in %d seconds: %s", delay, occurrence)
            track_status = bool(self.status and self.status.is_tracking(occurrence.payload_id))
            self.scheduler.enqueue_at(
                retry_at,
                occurrence.queue,
                occurrence.job_class,
                occurrence.arguments,
                track_status,
                occurrence.payload_id,
            )

        occurrence.is_retrying = True
        occurrence.retry_delay = delay
        occurrence.retry_at = retry_at


class ExponentialRetry(Retry):
    """Retry with delays that grow through a staged backoff strategy.

    ``backoff_strategy`` lists the delay for each attempt; attempts past its
    end reuse the last step. ``retry_limit`` defaults to the number of steps.
    """

    def retry_limit(self, occurrence: JobOccurrence) -> int:
        default = len(self.backoff_strategy(occurrence))
        return get_instance_property(occurrence, "retry_limit", default)

    def retry_delay(self, occurrence: JobOccurrence) -> int:
        return staged_delay(self.backoff_strategy(occurrence), occurrence.attempt_number or 0)

    def backoff_strategy(self, occurrence: JobOccurrence):
        strategy = get_instance_property(occurrence, "backoff_strategy", DEFAULT_BACKOFF_STRATEGY)
        return normalize_strategy(strategy)


def _exception_matches(cause: BaseException, expected: Any) -> bool:
    if isinstance(expected, type):
        return isinstance(cause, expected)

    name = str(expected).lstrip(".")
    for klass in type(cause).__mro__:
        if name in (klass.__name__, f"{klass.__module__}.{klass.__qualname__}"):
            return True
    return False


def register_retry_plugins(registry, attempts: AttemptStore, scheduler, queue, status=None, max_delay: Optional[int] = None) -> None:
    """Register ``Retry`` and ``ExponentialRetry`` on a plugin registry."""
    def factory(cls):
        return lambda: cls(attempts, scheduler, queue, status=status, max_delay=max_delay)

    registry.register("Retry", factory(Retry))
    registry.register("ExponentialRetry", factory(ExponentialRetry))
