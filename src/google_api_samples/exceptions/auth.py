from .base import AuthenticationError


class InvalidCredentialsError(AuthenticationError):
    """Raised when client secrets or cached credentials are invalid."""
    pass


class ScopeError(AuthenticationError):
    """Raised when required OAuth scopes are not granted."""
    pass
