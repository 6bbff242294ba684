"""Fixtures for infrastructure.logging tests."""

import pytest
from unittest.mock import Mock

from infrastructure.configuration import Settings
from infrastructure.logging.setup import configure_logging


@pytest.fixture
def mock_settings():
    """Mock Settings instance for testing."""
    settings = Mock(spec=Settings)
    settings.LOG_LEVEL = "INFO"
    settings.GIT_SHA = "abc1234"
    settings.is_production = False
    return settings


@pytest.fixture
def outside_test_environment(monkeypatch, mock_settings):
    """Let configure_logging run its real configuration path.

    The silenced test configuration is restored afterwards.
    """
    monkeypatch.setattr(
        "infrastructure.logging.setup._is_test_environment", lambda: False
    )
    yield
    monkeypatch.undo()
    configure_logging(settings=mock_settings)
