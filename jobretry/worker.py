"""Worker process for performing jobs with lifecycle hooks."""

import logging
import signal
import time
from typing import Callable, List, Optional

from .jobs import get_job_class
from .models import JobOccurrence
from .plugin import HookDispatcher

logger = logging.getLogger(__name__)


class Worker:
    """Performs jobs from the queue and reports terminal failures."""

    def __init__(
        self,
        dispatcher: HookDispatcher,
        failures,
        queue=None,
        worker_id: int = 1,
        resolve_job_class: Callable[[str], type] = get_job_class,
    ):
        self.dispatcher = dispatcher
        self.failures = failures
        self.queue = queue
        self.worker_id = worker_id
        self.resolve_job_class = resolve_job_class
        self.running = True
        self.current_job: Optional[JobOccurrence] = None

    def _handle_shutdown(self, signum, frame):
        """Handle shutdown signal gracefully."""
        self.running = False
        if self.current_job:
            logger.info("[Worker %s] Finishing current job %s", self.worker_id, self.current_job)

    def run(self, queues: List[str], poll_interval: float = 5.0) -> None:
        """Poll ``queues`` in order until stopped."""
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

        logger.info("[Worker %s] Started on %s", self.worker_id, ", ".join(queues))
        while self.running:
            try:
                occurrence = self._reserve(queues)
                if occurrence:
                    self.perform(occurrence)
                else:
                    time.sleep(poll_interval)
            except Exception:
                logger.exception("[Worker %s] Error", self.worker_id)
                time.sleep(poll_interval)
        logger.info("[Worker %s] Stopped", self.worker_id)

    def _reserve(self, queues: List[str]) -> Optional[JobOccurrence]:
        for queue in queues:
            occurrence = self.queue.pop(queue)
            if occurrence:
                return occurrence
        return None

    def perform(self, occurrence: JobOccurrence) -> bool:
        """Perform a single job. Returns True if it succeeded."""
        occurrence.worker = str(self.worker_id)
        self.current_job = occurrence
        try:
            try:
                if occurrence.instance is None:
                    occurrence.instance = self.resolve_job_class(occurrence.job_class)()
            except Exception as e:
                self._fail(e, occurrence)
                return False

            # hook errors propagate, only the job itself is retried
            self.dispatcher.before_perform(occurrence)
            try:
                occurrence.instance.perform(*occurrence.arguments)
            except Exception as e:
                self._fail(e, occurrence)
                return False
            self.dispatcher.after_perform(occurrence)

            logger.info("[Worker %s] Job %s completed successfully", self.worker_id, occurrence)
            return True
        finally:
            self.current_job = None

    def _fail(self, cause: Exception, occurrence: JobOccurrence) -> None:
        outcome = self.dispatcher.on_failure(cause, occurrence)
        if outcome.is_retrying:
            logger.info(
                "[Worker %s] Job %s failed (attempt %s), retrying",
                self.worker_id, occurrence, occurrence.attempt_number,
            )
            return

        logger.error("[Worker %s] Job %s failed: %s", self.worker_id, occurrence, cause)
        self.failures.save(cause, occurrence)
