class GoogleApiSamplesError(Exception):
    """Base exception for all Google API sample errors."""
    pass


class AuthenticationError(GoogleApiSamplesError):
    """Raised when authentication fails."""
    pass


class APIError(GoogleApiSamplesError):
    """Raised when API calls fail."""
    pass


class ValidationError(GoogleApiSamplesError):
    """Raised when input validation fails."""
    pass


class PaginationError(GoogleApiSamplesError):
    """Raised when a paginated response carries an invalid row count (totalMatchedRows)."""
    pass
