"""Root fixtures shared by every test package."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging_context():
    """Keep job context from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
