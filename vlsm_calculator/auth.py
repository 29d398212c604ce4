"""
Authentication utilities.

Provides API key validation and the get_current_user dependency used to
protect endpoints.
"""

from .config import AuthMethod, get_auth_method


def validate_api_key(api_key: str | None, valid_keys: list[str]) -> bool:
    """
    Validate an API key against the list of valid keys.

    Args:
        api_key: The API key to validate (from X-API-Key header)
        valid_keys: List of valid API keys

    Returns:
        bool: True if the API key is valid, False otherwise

    Note:
        - Returns False if api_key is None or empty (after stripping)
        - API keys are case-sensitive
        - Leading/trailing whitespace is stripped from the provided key
    """
    if not api_key:
        return False

    api_key = api_key.strip()

    if not api_key:
        return False

    return api_key in valid_keys


async def get_current_user() -> str:
    """
    FastAPI dependency to get the caller identity.

    - none: Returns "anonymous" (no auth required)
    - api_key: Returns "api_key_user" (the middleware has already validated the key)

    Returns:
        str: Identity used for request logging
    """
    if get_auth_method() == AuthMethod.API_KEY:
        return "api_key_user"

    return "anonymous"
