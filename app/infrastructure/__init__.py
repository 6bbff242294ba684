"""Infrastructure modules for the SQS retry scheduler.

Centralized infrastructure components:
- configuration: Settings management (Settings, AwsSettings, RetrySettings)
- logging: Structured logging (configure_logging, get_module_logger)
- operations: Operation results and statuses
- clients: AWS clients (SQS)
- resilience: Delayed-retry scheduler and queue gateways
- services: Cached providers (get_settings, get_aws_clients)
"""

# Configuration
from infrastructure.configuration import Settings

# Logging
from infrastructure.logging import configure_logging, get_module_logger

# Operations
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# Services
from infrastructure.services import get_aws_clients, get_settings

__all__ = [
    # Configuration
    "Settings",
    # Logging
    "configure_logging",
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
    # Services
    "get_settings",
    "get_aws_clients",
]
