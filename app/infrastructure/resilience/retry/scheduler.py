"""Delayed-retry scheduler.

The scheduler keeps no job state of its own. Each job lives in exactly one
queue message whose body is a JobEnvelope; every cycle receives a message,
decides whether the job is due, runs the work function when it is, and puts
the successor envelope back on the queue with a delivery delay.

A message is deleted only after its successor has been sent or the job has
completed, so a crash between the two steps leaves a duplicate rather than a
lost job. Delivery is therefore at least once.

When the last allowed attempt fails, the envelope is queued once more with
attempted_count equal to max_attempts. That message is never deleted: every
receive of it reports EXHAUSTED until the queue's redrive policy moves it to
the dead-letter queue. Any other redelivery (a failed send, a crash) carries
an envelope that is still within budget and simply resumes the job.
"""

import threading
from datetime import timedelta
from typing import Callable, Optional

from infrastructure.logging import bind_job_context, get_module_logger
from infrastructure.resilience.retry.backoff import BackoffPolicy
from infrastructure.resilience.retry.clock import Clock, SystemClock
from infrastructure.resilience.retry.config import RetryConfig
from infrastructure.resilience.retry.exceptions import (
    EnvelopeDecodeError,
    QueueOperationError,
    RetrySchedulerError,
    WorkFunctionError,
)
from infrastructure.resilience.retry.gateway import QueueGateway, QueueMessage
from infrastructure.resilience.retry.models import (
    CycleOutcome,
    JobAttempt,
    JobEnvelope,
    JobId,
)
from infrastructure.resilience.retry.reconciler import (
    DelayReconciler,
    delay_seconds_for,
)

logger = get_module_logger()

WorkFunction = Callable[[JobAttempt], bool]
ErrorHandler = Callable[[Exception], None]


def log_error_handler(error: Exception) -> None:
    """Default error handler: log and carry on."""
    logger.error(
        "retry_scheduler_error",
        error=str(error),
        error_type=type(error).__name__,
    )


class RetryScheduler:
    """Runs jobs until their work function completes or the budget runs out.

    Attributes:
        gateway: Delay queue used as timer and persistence
        work: Called with a JobAttempt, returns True once the job is done
        backoff: Delay before attempt n, applied when attempt n-1 is due
        config: RetryConfig with budget, poll wait and delay ceiling
        error_handler: Receives every recoverable failure
        clock: Source of the current time

    Example:
        scheduler = RetryScheduler(
            gateway=InMemoryQueueGateway(),
            work=lambda attempt: sync_user(attempt.id),
            backoff=exponential_backoff(timedelta(seconds=30)),
        )
        scheduler.start()
        scheduler.job("user-123")
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        gateway: QueueGateway,
        work: WorkFunction,
        backoff: BackoffPolicy,
        config: Optional[RetryConfig] = None,
        error_handler: Optional[ErrorHandler] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.gateway = gateway
        self.work = work
        self.backoff = backoff
        self.config = config or RetryConfig()
        self.error_handler = error_handler or log_error_handler
        self.clock = clock or SystemClock()
        self.reconciler = DelayReconciler(
            backoff, due_tolerance=timedelta(seconds=self.config.due_tolerance_seconds)
        )
        self.max_delay_seconds = min(
            self.config.max_delay_seconds, self.gateway.max_delay_seconds
        )

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self.log = logger.bind(component="retry_scheduler")

    def job(self, job_id: JobId) -> None:
        """Submit a new job and run its first attempt immediately.

        The first attempt runs on the calling thread. If it does not complete,
        the next attempt is queued according to the backoff policy.

        Raises:
            QueueOperationError: If the follow-up attempt could not be queued
        """
        envelope = JobEnvelope.new(job_id, self.clock.now())
        with bind_job_context(job_id=job_id):
            self.log.info("retry_job_submitted")
            self._evaluate(envelope, source=None)

    def poll_once(self) -> CycleOutcome:
        """Receive and handle at most one queued job.

        Failures are passed to the error handler and reported as FAILED.
        """
        result = self.gateway.receive(self.config.wait_time_seconds)
        if not result.is_success:
            self._report(QueueOperationError("receive", result))
            return CycleOutcome.FAILED

        message: Optional[QueueMessage] = result.data
        if message is None:
            return CycleOutcome.IDLE

        try:
            envelope = JobEnvelope.from_body(message.body)
        except EnvelopeDecodeError as e:
            self._report(e)
            return CycleOutcome.FAILED

        with bind_job_context(
            job_id=envelope.id,
            attempted_count=envelope.attempted_count,
            message_id=message.message_id,
        ):
            self.log.info("retry_message_received", receive_count=message.receive_count)

            # Left undeleted for the queue's redrive policy.
            if self.config.is_exhausted(envelope.attempted_count):
                self.log.warning(
                    "retry_budget_exhausted",
                    max_attempts=self.config.max_attempts,
                    receive_count=message.receive_count,
                )
                return CycleOutcome.EXHAUSTED

            try:
                return self._evaluate(envelope, source=message)
            except RetrySchedulerError as e:
                self._report(e)
                return CycleOutcome.FAILED

    def run_forever(self) -> None:
        """Poll until stop() is called."""
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception as e:
                self.log.error("retry_cycle_failed", error=str(e), exc_info=True)
                self._report(e)

    def start(self) -> None:
        """Run the poll loop on a background daemon thread."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                self.log.debug("retry_scheduler_already_running")
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self.run_forever, daemon=True, name="retry-scheduler"
            )
            self._thread.start()
        self.log.info(
            "retry_scheduler_started",
            max_attempts=self.config.max_attempts,
            wait_time_seconds=self.config.wait_time_seconds,
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the poll loop; the in-progress long poll finishes first.

        Called from the poll thread itself (a work function or error handler),
        it only signals the loop, which exits after the current cycle.
        """
        self._stop_event.set()
        with self._lock:
            thread = self._thread
        if thread is threading.current_thread():
            self.log.info("retry_scheduler_stopping")
            return
        if thread is not None:
            thread.join(timeout=timeout)
            if thread.is_alive():
                self.log.warning("retry_scheduler_stop_timeout", timeout=timeout)
                return
        with self._lock:
            self._thread = None
        self.log.info("retry_scheduler_stopped")

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def _evaluate(
        self, envelope: JobEnvelope, source: Optional[QueueMessage]
    ) -> CycleOutcome:
        reconciliation = self.reconciler.reconcile(envelope, self.clock.now())

        if not reconciliation.due:
            delay = self._send(envelope, reconciliation.wait)
            self._acknowledge(source)
            self.log.info(
                "retry_job_deferred",
                remaining_seconds=reconciliation.wait.total_seconds(),
                delay_seconds=delay,
            )
            return CycleOutcome.DEFERRED

        current = reconciliation.envelope
        if self._run_work(current):
            self._acknowledge(source)
            self.log.info("retry_job_completed", attempted_count=current.attempted_count)
            return CycleOutcome.COMPLETED

        if self.config.is_exhausted(current.attempted_count):
            # The spent envelope goes back with no delay; once received it is
            # recognised as exhausted and left for the queue's redrive policy.
            self._send(current, timedelta(0))
            self._acknowledge(source)
            self.log.warning(
                "retry_budget_exhausted",
                attempted_count=current.attempted_count,
                max_attempts=self.config.max_attempts,
            )
            return CycleOutcome.EXHAUSTED

        delay = self._send(current, current.next_attempt_at - self.clock.now())
        self._acknowledge(source)
        self.log.info(
            "retry_job_rescheduled",
            attempted_count=current.attempted_count,
            next_attempt_at=current.next_attempt_at.isoformat(),
            delay_seconds=delay,
        )
        return CycleOutcome.RESCHEDULED

    def _run_work(self, envelope: JobEnvelope) -> bool:
        try:
            return bool(self.work(envelope.attempt))
        except Exception as e:
            self.log.error(
                "retry_work_function_raised",
                attempted_count=envelope.attempted_count,
                error=str(e),
                exc_info=True,
            )
            self._report(WorkFunctionError(envelope.id, e))
            return False

    def _send(self, envelope: JobEnvelope, wait: timedelta) -> int:
        delay = delay_seconds_for(wait, self.max_delay_seconds)
        result = self.gateway.send(envelope.to_body(), delay)
        if not result.is_success:
            raise QueueOperationError("send", result)
        return delay

    def _acknowledge(self, source: Optional[QueueMessage]) -> None:
        if source is None:
            return
        result = self.gateway.delete(source.receipt_handle)
        if not result.is_success:
            raise QueueOperationError("delete", result)

    def _report(self, error: Exception) -> None:
        try:
            self.error_handler(error)
        except Exception as handler_error:
            self.log.error(
                "retry_error_handler_failed",
                error=str(handler_error),
                original_error=str(error),
                exc_info=True,
            )
