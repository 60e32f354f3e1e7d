from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, List, Optional
import logging

from googleapiclient.errors import HttpError

from ...exceptions import AdSenseError, AdSenseNotFoundError, AdSensePermissionError, ValidationError
from ...paging import DEFAULT_ROW_LIMIT, Page, iter_offset_pages, iter_token_pages
from ...reports import DateRange, ReportQueryBuilder, ReportTable, ad_client_filter, fill_date_gaps
from . import utils
from .constants import (
    DEFAULT_DIMENSIONS, DEFAULT_MAX_PAGE_SIZE, DEFAULT_METRICS, DEFAULT_SORT, MAX_PAGE_SIZE_LIMIT
)
from .types import Account, AdClient, AdUnit, CustomChannel, SavedReport, UrlChannel

logger = logging.getLogger(__name__)


@contextmanager
def adsense_errors(action: str):
    """Translates googleapiclient HTTP errors raised while performing ``action``."""
    try:
        yield
    except HttpError as e:
        if e.resp.status == 403:
            raise AdSensePermissionError(f"Permission denied {action}: {e}") from e
        elif e.resp.status == 404:
            raise AdSenseNotFoundError(f"Not found while {action}: {e}") from e
        else:
            raise AdSenseError(f"AdSense API error {action}: {e}") from e


def build_report_params(
        ad_client_id: Optional[str],
        date_range: DateRange,
        metrics: Iterable[str],
        dimensions: Iterable[str],
        sort: Iterable[str],
        filters: Optional[Iterable[str]] = None
) -> dict:
    """Builds reports.generate keyword arguments."""
    params = date_range.to_api_params()
    all_filters = list(filters or [])
    if ad_client_id:
        all_filters.insert(0, ad_client_filter(ad_client_id))
    if all_filters:
        params['filter'] = all_filters
    params['metric'] = list(metrics)
    params['dimension'] = list(dimensions)
    params['sort'] = list(sort)
    return params


def page_to_table(page: Page) -> ReportTable:
    """Turns one report page into a table, keeping only the rows the paginator kept."""
    return ReportTable.from_response(dict(page.raw, rows=page.items))


class AdSenseApiService:
    """
    Service layer for AdSense Management API operations.

    Every listing walks all pages with the token paginator; reports use the
    offset paginator bounded by the API's row limit.
    """

    def __init__(self, service: Any, max_page_size: int = DEFAULT_MAX_PAGE_SIZE):
        """
        Initialize AdSense service.

        Args:
            service: The AdSense API service instance (from googleapiclient)
            max_page_size: Maximum number of items requested per page
        """
        if max_page_size < 1 or max_page_size > MAX_PAGE_SIZE_LIMIT:
            raise ValidationError(f"max_page_size must be between 1 and {MAX_PAGE_SIZE_LIMIT}")
        self._service = service
        self._max_page_size = max_page_size

    def query(self) -> ReportQueryBuilder:
        """
        Create a new ReportQueryBuilder for building reports with a fluent API.

        Returns:
            ReportQueryBuilder instance for method chaining
        """
        return ReportQueryBuilder(self)

    def _list_all(self, list_method: Callable, parse: Callable[[dict], Any], description: str, **params) -> list:
        def fetch(page_token: Optional[str], page_size: Optional[int]) -> Page:
            request_params = dict(params, maxResults=page_size)
            if page_token:
                request_params['pageToken'] = page_token
            return Page.from_response(list_method(**request_params).execute())

        results = []
        with adsense_errors(f"listing {description}"):
            for page in iter_token_pages(fetch, page_size=self._max_page_size):
                for item in page.items:
                    try:
                        results.append(parse(item))
                    except (KeyError, TypeError, ValueError) as e:
                        logger.warning("Failed to parse %s item %s: %s", description, item.get('id'), e)

        logger.info("Retrieved %d %s", len(results), description)
        return results

    # Inventory
    def list_accounts(self) -> List[Account]:
        """
        Fetches all AdSense accounts for the logged in user.

        Returns:
            A list of Account objects.
        """
        logger.info("Listing all AdSense accounts")
        return self._list_all(self._service.accounts().list, utils.from_google_account, "accounts")

    def get_account_tree(self, account_id: str) -> Account:
        """
        Retrieves an account together with its full tree of sub-accounts.

        Args:
            account_id: The ID of the account to retrieve.

        Returns:
            The account, with sub_accounts populated recursively.
        """
        logger.info("Fetching account tree for %s", account_id)
        with adsense_errors(f"getting account {account_id}"):
            response = self._service.accounts().get(accountId=account_id, tree=True).execute()
        return utils.from_google_account(response)

    def list_ad_clients(self, account_id: Optional[str] = None) -> List[AdClient]:
        """
        Fetches all ad clients, for one account or for the default account.

        Args:
            account_id: Account to list ad clients for; None uses the default account.

        Returns:
            A list of AdClient objects.
        """
        if account_id:
            logger.info("Listing all ad clients for account %s", account_id)
            return self._list_all(
                self._service.accounts().adclients().list, utils.from_google_ad_client,
                "ad clients", accountId=account_id
            )
        logger.info("Listing all ad clients for default account")
        return self._list_all(self._service.adclients().list, utils.from_google_ad_client, "ad clients")

    def list_ad_units(self, ad_client_id: str) -> List[AdUnit]:
        logger.info("Listing all ad units for ad client %s", ad_client_id)
        return self._list_all(
            self._service.adunits().list, utils.from_google_ad_unit, "ad units", adClientId=ad_client_id
        )

    def list_custom_channels(self, ad_client_id: str) -> List[CustomChannel]:
        logger.info("Listing all custom channels for ad client %s", ad_client_id)
        return self._list_all(
            self._service.customchannels().list, utils.from_google_custom_channel,
            "custom channels", adClientId=ad_client_id
        )

    def list_custom_channels_for_ad_unit(self, ad_client_id: str, ad_unit_id: str) -> List[CustomChannel]:
        """
        Fetches the custom channels an ad unit is tagged with.

        Args:
            ad_client_id: The ad client the ad unit belongs to.
            ad_unit_id: The ad unit to list custom channels for.
        """
        logger.info("Listing all custom channels for ad unit %s", ad_unit_id)
        return self._list_all(
            self._service.adunits().customchannels().list, utils.from_google_custom_channel,
            "custom channels", adClientId=ad_client_id, adUnitId=ad_unit_id
        )

    def list_ad_units_for_custom_channel(self, ad_client_id: str, custom_channel_id: str) -> List[AdUnit]:
        logger.info("Listing all ad units for custom channel %s", custom_channel_id)
        return self._list_all(
            self._service.customchannels().adunits().list, utils.from_google_ad_unit,
            "ad units", adClientId=ad_client_id, customChannelId=custom_channel_id
        )

    def list_url_channels(self, ad_client_id: str) -> List[UrlChannel]:
        logger.info("Listing all URL channels for ad client %s", ad_client_id)
        return self._list_all(
            self._service.urlchannels().list, utils.from_google_url_channel,
            "URL channels", adClientId=ad_client_id
        )

    def list_saved_reports(self) -> List[SavedReport]:
        logger.info("Listing all saved reports")
        return self._list_all(
            self._service.reports().saved().list, utils.from_google_saved_report, "saved reports"
        )

    # Reports
    def generate_report(
            self,
            ad_client_id: Optional[str],
            date_range: DateRange,
            metrics: Iterable[str] = DEFAULT_METRICS,
            dimensions: Iterable[str] = DEFAULT_DIMENSIONS,
            sort: Iterable[str] = DEFAULT_SORT,
            filters: Optional[Iterable[str]] = None,
            fill_gaps: bool = False
    ) -> ReportTable:
        """
        Generates a report in a single request.

        Args:
            ad_client_id: Ad client to filter on; None reports across all ad clients.
            date_range: Inclusive range of days to report on.
            metrics: Metrics to include.
            dimensions: Dimensions to break the report down by.
            sort: Sort keys, e.g. '+DATE'.
            filters: Additional filter expressions.
            fill_gaps: Append placeholder rows for days and months without data.

        Returns:
            The generated ReportTable.
        """
        params = build_report_params(ad_client_id, date_range, metrics, dimensions, sort, filters)
        logger.info("Running report for ad client %s over %s", ad_client_id, date_range)

        with adsense_errors("generating report"):
            response = self._service.reports().generate(**params).execute()

        table = ReportTable.from_response(response)
        logger.info("Report returned %d rows", len(table.rows))
        if fill_gaps:
            fill_date_gaps(table, date_range)
        return table

    def iter_report_pages(
            self,
            ad_client_id: Optional[str],
            date_range: DateRange,
            metrics: Iterable[str] = DEFAULT_METRICS,
            dimensions: Iterable[str] = DEFAULT_DIMENSIONS,
            sort: Iterable[str] = DEFAULT_SORT,
            filters: Optional[Iterable[str]] = None,
            page_size: Optional[int] = None,
            row_limit: int = DEFAULT_ROW_LIMIT
    ) -> Iterator[ReportTable]:
        """
        Generates a report page by page.

        Only use paging when memory or storage constraints require it; the API
        will not page past ``row_limit`` rows.

        Yields:
            One ReportTable per page, in row order.
        """
        params = build_report_params(ad_client_id, date_range, metrics, dimensions, sort, filters)
        logger.info("Running paginated report for ad client %s over %s", ad_client_id, date_range)

        def fetch(start_index: int, max_results: int) -> Page:
            with adsense_errors("generating paginated report"):
                response = self._service.reports().generate(
                    startIndex=start_index, maxResults=max_results, **params
                ).execute()
            return Page.from_response(response, items_key='rows')

        for page in iter_offset_pages(fetch, page_size or self._max_page_size, row_limit):
            yield page_to_table(page)

    def generate_report_with_paging(
            self,
            ad_client_id: Optional[str],
            date_range: DateRange,
            metrics: Iterable[str] = DEFAULT_METRICS,
            dimensions: Iterable[str] = DEFAULT_DIMENSIONS,
            sort: Iterable[str] = DEFAULT_SORT,
            filters: Optional[Iterable[str]] = None,
            page_size: Optional[int] = None,
            row_limit: int = DEFAULT_ROW_LIMIT,
            fill_gaps: bool = False
    ) -> ReportTable:
        """
        Generates a report page by page and merges the pages into one table.

        Returns:
            The merged ReportTable; empty when the first page has no rows.
        """
        table = ReportTable()
        for page_table in self.iter_report_pages(
                ad_client_id, date_range, metrics, dimensions, sort, filters, page_size, row_limit):
            table.extend(page_table)

        logger.info("Paginated report returned %d rows", len(table.rows))
        if fill_gaps:
            fill_date_gaps(table, date_range)
        return table

    def generate_saved_report(
            self,
            saved_report_id: str,
            page_size: Optional[int] = None,
            row_limit: int = DEFAULT_ROW_LIMIT
    ) -> ReportTable:
        """
        Generates a saved report, paging through its rows.

        Args:
            saved_report_id: The saved report to run.
            page_size: Rows per request.
            row_limit: Maximum rows to read.
        """
        logger.info("Generating saved report %s", saved_report_id)

        def fetch(start_index: int, max_results: int) -> Page:
            with adsense_errors(f"generating saved report {saved_report_id}"):
                response = self._service.reports().saved().generate(
                    savedReportId=saved_report_id, startIndex=start_index, maxResults=max_results
                ).execute()
            return Page.from_response(response, items_key='rows')

        table = ReportTable()
        for page in iter_offset_pages(fetch, page_size or self._max_page_size, row_limit):
            table.extend(page_to_table(page))
        return table
