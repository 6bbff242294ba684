"""
Application services.

Provides cached provider functions for settings and AWS clients.
"""

from infrastructure.services.providers import (
    get_settings,
    get_aws_clients,
)

__all__ = [
    "get_settings",
    "get_aws_clients",
]
