"""Google AdSense Management API consumer."""

from .api_service import AdSenseApiService
from .async_api_service import AsyncAdSenseApiService
from .types import Account, AdClient, AdUnit, CustomChannel, UrlChannel, SavedReport
from .constants import ADSENSE_API_NAME, ADSENSE_API_VERSION, ADSENSE_SCOPE_READONLY

__all__ = [
    # Service layers
    "AdSenseApiService",
    "AsyncAdSenseApiService",

    # Data types
    "Account",
    "AdClient",
    "AdUnit",
    "CustomChannel",
    "UrlChannel",
    "SavedReport",

    # API identity
    "ADSENSE_API_NAME",
    "ADSENSE_API_VERSION",
    "ADSENSE_SCOPE_READONLY",
]
