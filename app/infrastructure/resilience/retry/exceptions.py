"""Exceptions raised and reported by the retry scheduler.

Transport and decode failures are handed to the caller's error handler
rather than raised out of the poll loop; they only propagate from ``job()``.
"""

from typing import Any, Optional

from infrastructure.operations.result import OperationResult


class RetrySchedulerError(Exception):
    """Base exception for retry scheduler errors.

    Example:
        def on_error(error: Exception) -> None:
            if isinstance(error, RetrySchedulerError):
                logger.warning("retry_error", error=str(error))
    """

    pass


class QueueOperationError(RetrySchedulerError):
    """A queue send, receive or delete call failed.

    Attributes:
        operation: 'send', 'receive' or 'delete'
        result: The failed OperationResult from the gateway
    """

    def __init__(self, operation: str, result: OperationResult) -> None:
        self.operation = operation
        self.result = result
        self.status = result.status
        self.error_code = result.error_code
        super().__init__(f"failed to {operation} queue message: {result.message}")


class EnvelopeDecodeError(RetrySchedulerError):
    """A queue message body could not be read as a job envelope.

    The message is left undeleted so the queue's redrive policy retires it.
    """

    def __init__(self, body: Optional[str], cause: Optional[Exception] = None) -> None:
        self.body = body
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"failed to read queue message as a job envelope{detail}")


class WorkFunctionError(RetrySchedulerError):
    """The work function raised instead of returning a completion flag.

    The attempt is treated as incomplete.
    """

    def __init__(self, job_id: Any, cause: Exception) -> None:
        self.job_id = job_id
        self.cause = cause
        super().__init__(f"work function raised for job {job_id!r}: {cause}")


class DelayConfigurationError(RetrySchedulerError, ValueError):
    """Invalid scheduling configuration (negative delay, tolerance or ceiling)."""

    pass
