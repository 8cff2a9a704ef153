"""Shared pytest configuration."""

import pytest

from depgraph.log_config import clear_context, configure_logging


@pytest.fixture(autouse=True, scope="session")
def structured_logging():
    """Route structlog through stdlib logging for the whole test session."""
    configure_logging(level="DEBUG", json_logs=True)
    yield
    clear_context()
