"""
Factory functions for application-scoped services.

Provides cached singleton providers for settings and AWS clients.
"""

from functools import lru_cache

from infrastructure.clients.aws import AWSClients
from infrastructure.configuration import Settings


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the process.
    The @lru_cache decorator ensures only ONE instance is created.

        from infrastructure.services import get_settings
        settings = get_settings()

    Tests that change the environment should call ``get_settings.cache_clear()``.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_aws_clients() -> AWSClients:
    """Provider for the AWS clients facade.

    Credentials are created per API call, so caching this facade does not
    hold stale credentials.

    Returns:
        AWSClients: Facade configured from settings.aws
    """
    settings = get_settings()
    return AWSClients(aws_settings=settings.aws)
