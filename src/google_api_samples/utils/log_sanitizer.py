"""
Log sanitization utilities to prevent OAuth secrets from leaking into logs.

Refresh tokens, client secrets and API keys are long-lived credentials; they
are reduced to a short fingerprint before they reach a log record.
"""

from typing import Iterable, Optional

SECRET_FIELDS = ('refresh_token', 'access_token', 'token', 'client_secret', 'api_key', 'key')


def sanitize_token(token: Optional[str], visible: int = 4) -> str:
    """
    Sanitize a token or secret for logging by showing only its tail and length.

    Args:
        token: Secret value to sanitize
        visible: Number of trailing characters to keep

    Returns:
        Sanitized token representation

    Example:
        "1//0gAbCdEfGh" -> "[token ...EfGh] (13 chars)"
    """
    if not token:
        return "[no-token]"

    if len(token) <= visible * 2:
        return f"[token] ({len(token)} chars)"
    return f"[token ...{token[-visible:]}] ({len(token)} chars)"


def sanitize_scopes(scopes: Optional[Iterable[str]]) -> str:
    """
    Shorten OAuth scope URLs to their last path segment.

    Args:
        scopes: Scope URLs

    Returns:
        Compact representation of the scope list
    """
    if not scopes:
        return "[]"

    names = [scope.rstrip('/').rsplit('/', 1)[-1] for scope in scopes]
    return f"[{', '.join(names)}]"


def sanitize_page_token(page_token: Optional[str]) -> Optional[str]:
    """Page tokens are opaque but can be long; keep a prefix only."""
    if not page_token:
        return None
    if len(page_token) <= 12:
        return page_token
    return f"{page_token[:8]}... ({len(page_token)} chars)"


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (refresh_token, scopes, page_token, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in SECRET_FIELDS:
            sanitized[key] = sanitize_token(value)
        elif key == 'scopes':
            sanitized[key] = sanitize_scopes(value)
        elif key == 'page_token':
            sanitized[key] = sanitize_page_token(value)
        else:
            # Non-secret fields are logged as-is
            sanitized[key] = value

    return sanitized
