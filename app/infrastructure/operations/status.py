"""Operation status enumeration.

Classifies the outcome of a queue or AWS call so callers can decide whether
to report, retry, or give up.
"""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation results.

    Attributes:
        SUCCESS: Call completed
        TRANSIENT_ERROR: Retryable failure (throttling, connection reset)
        PERMANENT_ERROR: Non-retryable failure (bad parameters, missing queue)
        UNAUTHORIZED: Credentials rejected or action not permitted
        NOT_FOUND: Queue or message does not exist
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
