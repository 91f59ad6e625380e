"""Shared fixtures for the volley test suite."""

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """CLI tests configure logging onto a captured stream; undo that after each test."""
    yield
    structlog.reset_defaults()
