"""
Walkthroughs that exercise the service layers end to end and print results.

Each walkthrough receives an already-authenticated service object; nothing
here builds credentials or reads process-wide state.
"""

import logging
from typing import Optional

from .paging import DEFAULT_ROW_LIMIT
from .reports import DateRange, display_report
from .services.adsense import AdSenseApiService, AsyncAdSenseApiService
from .services.adsense.utils import format_account_tree
from .services.dfareporting import CompatibleFields, DfaReportingApiService, Report
from .services.dfareporting.constants import ADVERTISER_DIMENSION, FLOODLIGHT_CONFIG_DIMENSION
from .utils.console import print_banner

logger = logging.getLogger(__name__)


class ManagementApiConsumer:
    """
    Runs a series of requests against the AdSense Management API:
    accounts, the account tree, ad clients, ad units, custom channels,
    URL channels, saved reports, a report and a paginated report.
    """

    def __init__(self, adsense: AdSenseApiService, date_range: DateRange,
                 page_size: Optional[int] = None, row_limit: int = DEFAULT_ROW_LIMIT,
                 fill_gaps: bool = True):
        self._adsense = adsense
        self._date_range = date_range
        self._page_size = page_size
        self._row_limit = row_limit
        self._fill_gaps = fill_gaps

    def run_calls(self, ad_client_id: Optional[str] = None) -> None:
        accounts = self._adsense.list_accounts()
        self._print_items("Listing all AdSense accounts", accounts, "No accounts found.")

        # Use the first account and ad client as examples for the rest of the calls
        if accounts:
            account_id = accounts[0].account_id
            print_banner(f"Displaying AdSense account tree for {account_id}")
            for line in format_account_tree(self._adsense.get_account_tree(account_id)):
                print(line)
            print()
            self._print_items(
                f"Listing all ad clients for account {account_id}",
                self._adsense.list_ad_clients(account_id), "No ad clients found."
            )

        ad_clients = self._adsense.list_ad_clients()
        self._print_items("Listing all ad clients for default account", ad_clients, "No ad clients found.")

        if ad_client_id is None and ad_clients:
            ad_client_id = ad_clients[0].ad_client_id
        if ad_client_id is None:
            return

        ad_units = self._adsense.list_ad_units(ad_client_id)
        self._print_items(f"Listing all ad units for ad client {ad_client_id}", ad_units, "No ad units found.")
        if ad_units:
            ad_unit = ad_units[0]
            self._print_items(
                f"Listing all custom channels for ad unit {ad_unit.ad_unit_id}",
                self._adsense.list_custom_channels_for_ad_unit(ad_client_id, ad_unit.ad_unit_id),
                "No custom channels found."
            )

        channels = self._adsense.list_custom_channels(ad_client_id)
        self._print_items(
            f"Listing all custom channels for ad client {ad_client_id}", channels, "No custom channels found."
        )
        if channels:
            channel = channels[0]
            self._print_items(
                f"Listing all ad units for custom channel {channel.custom_channel_id}",
                self._adsense.list_ad_units_for_custom_channel(ad_client_id, channel.custom_channel_id),
                "No ad units found."
            )

        self._print_items(
            f"Listing all URL channels for ad client {ad_client_id}",
            self._adsense.list_url_channels(ad_client_id), "No URL channels found."
        )

        saved_reports = self._adsense.list_saved_reports()
        self._print_items("Listing all saved reports", saved_reports, "No saved reports found.")
        if saved_reports:
            saved_report = saved_reports[0]
            print_banner(f"Running saved report {saved_report.saved_report_id}")
            display_report(self._adsense.generate_saved_report(
                saved_report.saved_report_id, self._page_size, self._row_limit
            ))
            print()

        print_banner(f"Running report for ad client {ad_client_id}")
        display_report(self._adsense.generate_report(ad_client_id, self._date_range, fill_gaps=self._fill_gaps))
        print()

        print_banner(f"Running paginated report for ad client {ad_client_id}")
        display_report(self._adsense.generate_report_with_paging(
            ad_client_id, self._date_range, page_size=self._page_size,
            row_limit=self._row_limit, fill_gaps=self._fill_gaps
        ))
        print()

    @staticmethod
    def _print_items(title: str, items: list, empty_message: str) -> None:
        print_banner(title)
        if not items:
            print(empty_message)
        for item in items:
            print(f"{item} was found.")
        print()


async def run_async_adsense_calls(adsense: AsyncAdSenseApiService, date_range: DateRange,
                                  ad_client_id: Optional[str] = None, page_size: Optional[int] = None,
                                  row_limit: int = DEFAULT_ROW_LIMIT, fill_gaps: bool = True) -> None:
    """Async variant of the walkthrough: accounts, ad clients and a paginated report."""
    accounts = await adsense.list_accounts()
    ManagementApiConsumer._print_items("Listing all AdSense accounts", accounts, "No accounts found.")

    ad_clients = await adsense.list_ad_clients()
    ManagementApiConsumer._print_items(
        "Listing all ad clients for default account", ad_clients, "No ad clients found."
    )

    if ad_client_id is None and ad_clients:
        ad_client_id = ad_clients[0].ad_client_id
    if ad_client_id is None:
        return

    print_banner(f"Running paginated report for ad client {ad_client_id}")
    display_report(await adsense.generate_report_with_paging(
        ad_client_id, date_range, page_size=page_size, row_limit=row_limit, fill_gaps=fill_gaps
    ))
    print()


def _print_dimension_values(dimension_name: str, values: list) -> None:
    print_banner(f"Listing available {dimension_name} values")
    if not values:
        print("No values found.")
    for value in values:
        print(f"{dimension_name} with value \"{value.value}\" was found.")
    print()


def _print_compatible_fields(report: Report, fields: CompatibleFields) -> None:
    print_banner(f"Getting compatible fields for report with ID {report.report_id}")
    for name in fields.dimensions:
        print(f"Dimension \"{name}\" is compatible.")
    for name in fields.metrics:
        print(f"Metric \"{name}\" is compatible.")
    for name in fields.dimension_filters:
        print(f"Dimension Filter \"{name}\" is compatible.")
    for name in fields.pivoted_activity_metrics:
        print(f"Pivoted Activity Metric \"{name}\" is compatible.")
    print()


def _run_and_download(dfareporting: DfaReportingApiService, profile_id: str, report: Report,
                      download: bool) -> None:
    print_banner(f"Generating a report file for report with ID {report.report_id}")
    report_file = dfareporting.generate_report_file(profile_id, report.report_id)
    if report_file is None:
        print("Report file generation failed to finish.")
        print()
        return
    print(f"Report file with ID \"{report_file.file_id}\" generated.")
    print()

    if download:
        print_banner(f"Retrieving and printing a report file for report with ID {report_file.report_id}")
        print(dfareporting.download_report_file(report_file))
        print()


def _create_and_run_report(dfareporting: DfaReportingApiService, profile_id: str, report_type: str,
                           date_range: DateRange, max_list_page_size: int, download: bool) -> None:
    """Creates a report for the first advertiser or Floodlight configuration found, then runs it."""
    if report_type == "STANDARD":
        dimension_name = ADVERTISER_DIMENSION
        create = dfareporting.create_standard_report
    else:
        dimension_name = FLOODLIGHT_CONFIG_DIMENSION
        create = dfareporting.create_floodlight_report

    values = dfareporting.query_dimension_values(profile_id, dimension_name, date_range, max_list_page_size)
    _print_dimension_values(dimension_name, values)
    if not values:
        return

    print_banner(f"Creating a new {report_type.lower()} report for {dimension_name} {values[0].value}")
    report = create(profile_id, values[0], date_range)
    print(f"Created report with ID \"{report.report_id}\" and display name \"{report.name}\"")
    print()

    if report_type == "STANDARD":
        _print_compatible_fields(report, dfareporting.get_compatible_fields(profile_id, report))

    _run_and_download(dfareporting, profile_id, report, download)


def run_dfareporting_calls(dfareporting: DfaReportingApiService, date_range: DateRange,
                           profile_id: Optional[str] = None, max_page_size: int = 10,
                           max_list_page_size: int = 50, download: bool = True) -> None:
    """
    Picks a user profile, creates and runs a standard and a Floodlight report,
    then lists every report of the profile.
    """
    print_banner("Listing all user profiles")
    profiles = dfareporting.list_user_profiles()
    if not profiles:
        print("No user profiles found.")
        return
    for profile in profiles:
        print(f"User profile with ID \"{profile.profile_id}\" and name \"{profile.user_name}\" was found.")
    print()

    profile_id = profile_id or profiles[0].profile_id

    _create_and_run_report(dfareporting, profile_id, "STANDARD", date_range, max_list_page_size, download)
    _create_and_run_report(dfareporting, profile_id, "FLOODLIGHT", date_range, max_list_page_size, download)

    print_banner("Listing all reports")
    reports = dfareporting.list_reports(profile_id, max_page_size)
    if not reports:
        print("No reports found.")
    for report in reports:
        print(f"Report with ID \"{report.report_id}\" and display name \"{report.name}\" was found.")
    print()
