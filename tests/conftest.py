"""Shared fixtures for cronkit tests."""

import pytest

from cronkit.config import set_config


@pytest.fixture(autouse=True)
def reset_config():
    """Restore the default engine configuration after each test."""
    set_config(None)
    yield
    set_config(None)
