from .base import APIError


class AdSenseError(APIError):
    """Base exception for AdSense Management API errors."""
    pass


class AdSenseNotFoundError(AdSenseError):
    """Raised when an account, ad client or channel is not found."""
    pass


class AdSensePermissionError(AdSenseError):
    """Raised when the user lacks permission for an AdSense operation."""
    pass
