"""Operation result types and status enums.

Shared by the AWS clients and the retry queue gateways so every transport
call reports its outcome the same way.
"""

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
]
