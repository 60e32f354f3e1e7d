from .base import GoogleApiSamplesError, AuthenticationError, APIError, ValidationError, PaginationError
from .auth import InvalidCredentialsError, ScopeError
from .adsense import AdSenseError, AdSenseNotFoundError, AdSensePermissionError
from .dfareporting import DfaReportingError, ReportNotFoundError, DfaReportingPermissionError

__all__ = [
    "GoogleApiSamplesError",
    "AuthenticationError",
    "APIError",
    "ValidationError",
    "PaginationError",
    "InvalidCredentialsError",
    "ScopeError",
    "AdSenseError",
    "AdSenseNotFoundError",
    "AdSensePermissionError",
    "DfaReportingError",
    "ReportNotFoundError",
    "DfaReportingPermissionError",
]
