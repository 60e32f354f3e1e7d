from .base import APIError


class DfaReportingError(APIError):
    """Base exception for DFA Reporting API errors."""
    pass


class ReportNotFoundError(DfaReportingError):
    """Raised when a user profile, report or report file is not found."""
    pass


class DfaReportingPermissionError(DfaReportingError):
    """Raised when the user lacks permission for a reporting operation."""
    pass
