"""Infrastructure configuration module - public API.

Centralized configuration using Pydantic BaseSettings with domain-based
organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    AwsSettings: AWS integration settings
    RetrySettings: Retry scheduler settings

Example:
    ```python
    from infrastructure.services import get_settings

    settings = get_settings()

    queue_url = settings.retry.queue_url
    aws_region = settings.aws.AWS_REGION
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.integrations.aws import AwsSettings
from infrastructure.configuration.infrastructure.retry import RetrySettings

__all__ = ["Settings", "AwsSettings", "RetrySettings"]
