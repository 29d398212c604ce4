"""Pytest configuration and shared fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables before each test."""
    original_env = os.environ.copy()

    # Set default test environment
    os.environ["AUTH_METHOD"] = "none"
    os.environ.pop("API_KEYS", None)

    yield

    # Restore original env vars after test
    os.environ.clear()
    os.environ.update(original_env)
