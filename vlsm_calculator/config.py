"""
Configuration management.

Handles loading and validating settings from environment variables. Values are
read on every call so changes to the environment take effect without a restart.
"""

import logging
import os
from enum import Enum


class AuthMethod(str, Enum):
    """Supported authentication methods."""

    NONE = "none"
    API_KEY = "api_key"


def get_auth_method() -> AuthMethod:
    """
    Get the configured authentication method from environment.

    Returns:
        AuthMethod: The authentication method to use (default: NONE)

    Raises:
        ValueError: If AUTH_METHOD is set to an invalid value
    """
    auth_method_str = os.getenv("AUTH_METHOD", "none").strip().lower()

    try:
        return AuthMethod(auth_method_str)
    except ValueError as e:
        valid_methods = ", ".join([m.value for m in AuthMethod])
        raise ValueError(f"Invalid AUTH_METHOD: '{auth_method_str}'. Valid options: {valid_methods}") from e


def _env_list(name: str) -> list[str]:
    """Comma-separated environment value as a list, blanks dropped."""
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


def get_api_keys() -> list[str]:
    """
    Keys accepted in the X-API-Key header.

    Only consulted when AUTH_METHOD=api_key; otherwise an empty list.

    Raises:
        ValueError: If API_KEYS is unset or holds no keys
    """
    if get_auth_method() != AuthMethod.API_KEY:
        return []

    if not os.getenv("API_KEYS", "").strip():
        raise ValueError("API_KEYS environment variable required when AUTH_METHOD=api_key")

    keys = _env_list("API_KEYS")
    if not keys:
        raise ValueError("API_KEYS cannot be empty when AUTH_METHOD=api_key")

    return keys


def get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins from environment.

    Returns:
        List[str]: Origins from CORS_ORIGINS (comma-separated), or an empty
        list when unset, in which case the app applies development defaults
    """
    return _env_list("CORS_ORIGINS")


def get_log_level() -> int:
    """
    Get the logging level from LOG_LEVEL (default: INFO).

    Raises:
        ValueError: If LOG_LEVEL is not a standard level name
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(level_name)

    if not isinstance(level, int):
        raise ValueError(
            f"Invalid LOG_LEVEL: '{level_name}'. Valid options: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )

    return level


def validate_configuration():
    """
    Validate configuration at startup.

    Raises:
        ValueError: If configuration is invalid
    """
    get_log_level()

    if get_auth_method() == AuthMethod.API_KEY:
        # Raises if API_KEYS is missing or empty
        get_api_keys()
