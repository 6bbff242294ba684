"""Operation result dataclass.

Uniform return value for gateway and AWS client calls. Transport failures are
data, not exceptions, so the scheduler can report them and keep polling.
"""

from dataclasses import dataclass
from typing import Any, Optional

from infrastructure.operations.status import OperationStatus


@dataclass
class OperationResult:
    """Outcome of a single operation.

    Attributes:
        status: High-level outcome
        message: Human-friendly message for logs
        data: Optional payload (message id, received message, raw response)
        error_code: Optional machine error code (e.g. the AWS error code)
        retry_after: Optional seconds to wait before retrying
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None

    @property
    def is_success(self) -> bool:
        """True when status is SUCCESS."""
        return self.status == OperationStatus.SUCCESS

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok"
    ) -> "OperationResult":
        """Build a SUCCESS result carrying optional data."""
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def error(
        cls,
        status: OperationStatus,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
        data: Optional[Any] = None,
    ) -> "OperationResult":
        """Build an error result with an explicit status.

        Args:
            status: Error status
            message: Human-friendly error message
            error_code: Optional machine error code
            retry_after: Optional seconds until retry
            data: Optional payload

        Returns:
            OperationResult with the given status
        """
        return cls(
            status=status,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
            data=data,
        )

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Build a TRANSIENT_ERROR result (throttling, timeouts)."""
        return cls.error(
            OperationStatus.TRANSIENT_ERROR, message, error_code, retry_after
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Build a PERMANENT_ERROR result (validation, missing resources)."""
        return cls.error(OperationStatus.PERMANENT_ERROR, message, error_code)
