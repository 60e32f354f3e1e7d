"""Google DFA Reporting API consumer."""

from .api_service import DfaReportingApiService
from .types import UserProfile, Report, ReportFile, DimensionValue, CompatibleFields
from .constants import DFAREPORTING_API_NAME, DFAREPORTING_API_VERSION, DFAREPORTING_SCOPE

__all__ = [
    "DfaReportingApiService",
    "UserProfile",
    "Report",
    "ReportFile",
    "DimensionValue",
    "CompatibleFields",
    "DFAREPORTING_API_NAME",
    "DFAREPORTING_API_VERSION",
    "DFAREPORTING_SCOPE",
]
