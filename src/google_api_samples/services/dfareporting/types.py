from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import REPORT_STATUS_AVAILABLE, REPORT_STATUS_PROCESSING


@dataclass
class UserProfile:
    """
    A DFA Reporting user profile.
    Args:
        profile_id: Unique identifier of the profile.
        user_name: User name the profile belongs to.
        account_name: Name of the account the profile gives access to.
    """
    profile_id: Optional[str] = None
    user_name: Optional[str] = None
    account_name: Optional[str] = None

    @staticmethod
    def from_google_profile(google_profile: Dict[str, Any]) -> "UserProfile":
        return UserProfile(
            profile_id=str(google_profile.get('profileId')) if google_profile.get('profileId') is not None else None,
            user_name=google_profile.get('userName'),
            account_name=google_profile.get('accountName'),
        )


@dataclass
class Report:
    report_id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @staticmethod
    def from_google_report(google_report: Dict[str, Any]) -> "Report":
        return Report(
            report_id=str(google_report.get('id')) if google_report.get('id') is not None else None,
            name=google_report.get('name'),
            type=google_report.get('type'),
            raw=google_report,
        )


@dataclass
class ReportFile:
    """
    One run of a report.
    Args:
        file_id: Unique identifier of the file.
        report_id: Report this file was generated from.
        status: PROCESSING, REPORT_AVAILABLE, FAILED or CANCELLED.
        file_name: File name of the generated output.
        api_url: URL the file contents can be downloaded from.
    """
    file_id: Optional[str] = None
    report_id: Optional[str] = None
    status: Optional[str] = None
    file_name: Optional[str] = None
    api_url: Optional[str] = None

    @property
    def is_processing(self) -> bool:
        return self.status == REPORT_STATUS_PROCESSING

    @property
    def is_available(self) -> bool:
        return self.status == REPORT_STATUS_AVAILABLE

    @staticmethod
    def from_google_file(google_file: Dict[str, Any]) -> "ReportFile":
        urls = google_file.get('urls') or {}
        return ReportFile(
            file_id=str(google_file.get('id')) if google_file.get('id') is not None else None,
            report_id=str(google_file.get('reportId')) if google_file.get('reportId') is not None else None,
            status=google_file.get('status'),
            file_name=google_file.get('fileName'),
            api_url=urls.get('apiUrl'),
        )


@dataclass
class DimensionValue:
    """
    One value of a report dimension, usable as a report dimension filter.
    Args:
        dimension_name: Name of the dimension, e.g. 'advertiser'.
        value: Display value of the dimension.
        id: Identifier of the value.
        match_type: How the value is matched when used as a filter.
        etag: ETag of the resource.
    """
    dimension_name: Optional[str] = None
    value: Optional[str] = None
    id: Optional[str] = None
    match_type: Optional[str] = None
    etag: Optional[str] = None

    def to_google_dimension_value(self) -> Dict[str, Any]:
        google_value = {"dimensionName": self.dimension_name, "value": self.value, "id": self.id}
        if self.match_type:
            google_value["matchType"] = self.match_type
        return {k: v for k, v in google_value.items() if v is not None}

    @staticmethod
    def from_google_dimension_value(google_value: Dict[str, Any]) -> "DimensionValue":
        return DimensionValue(
            dimension_name=google_value.get('dimensionName'),
            value=google_value.get('value'),
            id=google_value.get('id'),
            match_type=google_value.get('matchType'),
            etag=google_value.get('etag'),
        )


@dataclass
class CompatibleFields:
    """
    Fields that can be added to a report alongside the ones it already uses.
    Args:
        dimensions: Compatible dimension names.
        metrics: Compatible metric names.
        dimension_filters: Compatible dimension filter names.
        pivoted_activity_metrics: Compatible pivoted activity metric names.
    """
    dimensions: List[str] = field(default_factory=list)
    metrics: List[str] = field(default_factory=list)
    dimension_filters: List[str] = field(default_factory=list)
    pivoted_activity_metrics: List[str] = field(default_factory=list)

    @staticmethod
    def from_google_compatible_fields(google_fields: Dict[str, Any]) -> "CompatibleFields":
        """
        Reads the section matching the report type, e.g. reportCompatibleFields
        for STANDARD reports or floodlightReportCompatibleFields.
        """
        section = {}
        for key, value in google_fields.items():
            if key.endswith("CompatibleFields") and isinstance(value, dict):
                section = value
                break

        def names(key):
            return [item.get('name') for item in section.get(key) or []]

        return CompatibleFields(
            dimensions=names('dimensions'),
            metrics=names('metrics'),
            dimension_filters=names('dimensionFilters'),
            pivoted_activity_metrics=names('pivotedActivityMetrics'),
        )
