from contextlib import contextmanager
from typing import Any, Callable, List, Optional
import io
import logging
import time

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload

from ...exceptions import DfaReportingError, DfaReportingPermissionError, ReportNotFoundError
from ...paging import Page, iter_token_pages
from ...reports import DateRange
from .constants import (
    ADVERTISER_DIMENSION, DEFAULT_MAX_LIST_PAGE_SIZE, DEFAULT_MAX_PAGE_SIZE, FLOODLIGHT_REPORT_DIMENSIONS,
    FLOODLIGHT_REPORT_FILE_NAME, FLOODLIGHT_REPORT_METRICS, MAX_POLLS, SECONDS_BETWEEN_POLLS,
    STANDARD_REPORT_FILE_NAME, STANDARD_REPORT_METRICS
)
from .types import CompatibleFields, DimensionValue, Report, ReportFile, UserProfile

logger = logging.getLogger(__name__)


@contextmanager
def dfareporting_errors(action: str):
    try:
        yield
    except HttpError as e:
        if e.resp.status == 403:
            raise DfaReportingPermissionError(f"Permission denied {action}: {e}") from e
        elif e.resp.status == 404:
            raise ReportNotFoundError(f"Not found while {action}: {e}") from e
        else:
            raise DfaReportingError(f"DFA Reporting API error {action}: {e}") from e


def build_standard_report_body(advertiser: DimensionValue, date_range: DateRange) -> dict:
    """
    Builds a STANDARD report of clicks and impressions filtered on one advertiser.

    Args:
        advertiser: An advertiser dimension value from query_dimension_values.
        date_range: Range of days the report covers.

    Returns:
        A reports.insert request body.
    """
    return {
        'name': f"API Report: Advertiser {advertiser.value}",
        'fileName': STANDARD_REPORT_FILE_NAME,
        'type': 'STANDARD',
        'criteria': {
            'dateRange': date_range.to_api_params(),
            'dimensions': [{'name': ADVERTISER_DIMENSION}],
            'metricNames': list(STANDARD_REPORT_METRICS),
            'dimensionFilters': [advertiser.to_google_dimension_value()],
        },
    }


def build_floodlight_report_body(floodlight_config: DimensionValue, date_range: DateRange) -> dict:
    """
    Builds a FLOODLIGHT report of activity conversions and revenue for one
    Floodlight configuration.
    """
    google_value = floodlight_config.to_google_dimension_value()
    return {
        'name': f"API Floodlight Report: Floodlight ID {floodlight_config.value}",
        'fileName': FLOODLIGHT_REPORT_FILE_NAME,
        'type': 'FLOODLIGHT',
        'floodlightCriteria': {
            'dateRange': date_range.to_api_params(),
            'floodlightConfigId': google_value,
            'dimensions': [{'name': name} for name in FLOODLIGHT_REPORT_DIMENSIONS],
            'metricNames': list(FLOODLIGHT_REPORT_METRICS),
            'dimensionFilters': [google_value],
        },
    }


class DfaReportingApiService:
    """
    Service layer for DFA Reporting API operations: user profiles, dimension
    values, creating and listing reports, running them and fetching the
    generated files.
    """

    def __init__(self, service: Any, sleep: Callable[[float], None] = time.sleep):
        """
        Initialize DFA Reporting service.

        Args:
            service: The DFA Reporting API service instance
            sleep: Function used to wait between status polls
        """
        self._service = service
        self._sleep = sleep

    def list_user_profiles(self) -> List[UserProfile]:
        """
        Fetches every user profile available to the logged in user.

        Returns:
            A list of UserProfile objects.
        """
        logger.info("Listing all user profiles")
        with dfareporting_errors("listing user profiles"):
            response = self._service.userProfiles().list().execute()
        profiles = [UserProfile.from_google_profile(p) for p in response.get('items') or []]
        logger.info("Retrieved %d user profiles", len(profiles))
        return profiles

    def list_reports(self, profile_id: str, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> List[Report]:
        """
        Fetches all reports of a user profile, page by page.

        Args:
            profile_id: The user profile to list reports for.
            max_page_size: Reports requested per page.

        Returns:
            A list of Report objects.
        """
        logger.info("Listing all reports for profile %s", profile_id)

        def fetch(page_token: Optional[str], page_size: Optional[int]) -> Page:
            request_params = {'profileId': profile_id, 'maxResults': page_size}
            if page_token:
                request_params['pageToken'] = page_token
            return Page.from_response(self._service.reports().list(**request_params).execute())

        reports = []
        with dfareporting_errors(f"listing reports for profile {profile_id}"):
            for page in iter_token_pages(fetch, page_size=max_page_size, stop_on_empty=True):
                reports.extend(Report.from_google_report(item) for item in page.items)

        logger.info("Retrieved %d reports", len(reports))
        return reports

    def query_dimension_values(
            self,
            profile_id: str,
            dimension_name: str,
            date_range: DateRange,
            max_page_size: int = DEFAULT_MAX_LIST_PAGE_SIZE
    ) -> List[DimensionValue]:
        """
        Fetches every value a dimension takes over a date range.

        Args:
            profile_id: The user profile to query with.
            dimension_name: Dimension to list, e.g. 'advertiser' or 'floodlightConfigId'.
            date_range: Range of days to look at.
            max_page_size: Values requested per page.

        Returns:
            A list of DimensionValue objects.
        """
        logger.info("Listing available %s values for profile %s", dimension_name, profile_id)
        body = dict(date_range.to_api_params(), dimensionName=dimension_name)

        def fetch(page_token: Optional[str], page_size: Optional[int]) -> Page:
            request_params = {'profileId': profile_id, 'body': body, 'maxResults': page_size}
            if page_token:
                request_params['pageToken'] = page_token
            return Page.from_response(self._service.dimensionValues().query(**request_params).execute())

        values = []
        with dfareporting_errors(f"querying {dimension_name} values"):
            for page in iter_token_pages(fetch, page_size=max_page_size):
                values.extend(DimensionValue.from_google_dimension_value(item) for item in page.items)

        logger.info("Retrieved %d %s values", len(values), dimension_name)
        return values

    def _insert_report(self, profile_id: str, body: dict) -> Report:
        logger.info("Creating %s report %r for profile %s", body['type'], body['name'], profile_id)
        with dfareporting_errors(f"creating report {body['name']!r}"):
            response = self._service.reports().insert(profileId=profile_id, body=body).execute()
        report = Report.from_google_report(response)
        logger.info("Created report with ID %s", report.report_id)
        return report

    def create_standard_report(self, profile_id: str, advertiser: DimensionValue, date_range: DateRange) -> Report:
        """
        Creates a STANDARD report of clicks and impressions for an advertiser.

        Returns:
            The created Report.
        """
        return self._insert_report(profile_id, build_standard_report_body(advertiser, date_range))

    def create_floodlight_report(
            self, profile_id: str, floodlight_config: DimensionValue, date_range: DateRange
    ) -> Report:
        return self._insert_report(profile_id, build_floodlight_report_body(floodlight_config, date_range))

    def get_compatible_fields(self, profile_id: str, report: Report) -> CompatibleFields:
        """
        Lists the fields that can be combined with the ones a report already uses.

        Args:
            profile_id: The user profile owning the report.
            report: The report to check, as returned by create_standard_report or list_reports.
        """
        logger.info("Getting compatible fields for report %s", report.report_id)
        with dfareporting_errors(f"getting compatible fields for report {report.report_id}"):
            response = self._service.reports().compatibleFields().query(
                profileId=profile_id, body=report.raw
            ).execute()
        return CompatibleFields.from_google_compatible_fields(response)

    def run_report(self, profile_id: str, report_id: str, synchronous: bool = True) -> ReportFile:
        """
        Starts a report run.

        Args:
            profile_id: The user profile owning the report.
            report_id: The report to run.
            synchronous: Ask the server to finish small reports before responding.

        Returns:
            The ReportFile describing the run.
        """
        logger.info("Running report %s for profile %s", report_id, profile_id)
        with dfareporting_errors(f"running report {report_id}"):
            response = self._service.reports().run(
                profileId=profile_id, reportId=report_id, synchronous=synchronous
            ).execute()
        return ReportFile.from_google_file(response)

    def get_report_file(self, profile_id: str, report_id: str, file_id: str) -> ReportFile:
        with dfareporting_errors(f"getting report file {file_id}"):
            response = self._service.reports().files().get(
                profileId=profile_id, reportId=report_id, fileId=file_id
            ).execute()
        return ReportFile.from_google_file(response)

    def wait_for_report_file(
            self,
            profile_id: str,
            report_file: ReportFile,
            poll_interval: float = SECONDS_BETWEEN_POLLS,
            max_polls: int = MAX_POLLS
    ) -> ReportFile:
        """
        Polls a report file until it leaves the PROCESSING state.

        Args:
            profile_id: The user profile owning the report.
            report_file: The file returned by run_report.
            poll_interval: Seconds to wait between polls.
            max_polls: Maximum number of status requests.

        Returns:
            The last seen state of the file, which may still be PROCESSING.
        """
        for _ in range(max_polls):
            if not report_file.is_processing:
                break
            logger.info("Polling again in %s seconds", poll_interval)
            self._sleep(poll_interval)
            report_file = self.get_report_file(profile_id, report_file.report_id, report_file.file_id)
        return report_file

    def generate_report_file(self, profile_id: str, report_id: str, **wait_kwargs) -> Optional[ReportFile]:
        """
        Runs a report and waits for its file.

        Returns:
            The available ReportFile, or None when generation did not finish.
        """
        report_file = self.run_report(profile_id, report_id)
        logger.info("Report execution initiated. Checking for completion...")
        report_file = self.wait_for_report_file(profile_id, report_file, **wait_kwargs)

        if not report_file.is_available:
            logger.warning(
                "Report file generation failed to finish. Final status is: %s", report_file.status
            )
            return None

        logger.info("Report file with ID %s generated", report_file.file_id)
        return report_file

    def download_report_file(self, report_file: ReportFile) -> str:
        """
        Downloads the contents of a generated report file.

        Args:
            report_file: An available report file.

        Returns:
            The file contents as text.
        """
        logger.info("Downloading report file %s of report %s", report_file.file_id, report_file.report_id)
        buffer = io.BytesIO()
        with dfareporting_errors(f"downloading report file {report_file.file_id}"):
            request = self._service.files().get_media(reportId=report_file.report_id, fileId=report_file.file_id)
            downloader = MediaIoBaseDownload(buffer, request)
            done = False
            while not done:
                _, done = downloader.next_chunk()
        return buffer.getvalue().decode("utf-8")
