from contextlib import asynccontextmanager
from typing import Any, Callable, Iterable, List, Optional
import logging

from aiogoogle.excs import HTTPError

from ...exceptions import AdSenseError, AdSenseNotFoundError, AdSensePermissionError
from ...paging import DEFAULT_ROW_LIMIT, Page, aiter_offset_pages, aiter_token_pages
from ...reports import DateRange, ReportTable, fill_date_gaps
from . import utils
from .api_service import build_report_params, page_to_table
from .constants import DEFAULT_DIMENSIONS, DEFAULT_MAX_PAGE_SIZE, DEFAULT_METRICS, DEFAULT_SORT
from .types import Account, AdClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def async_adsense_errors(action: str):
    """Translates aiogoogle HTTP errors raised while performing ``action``."""
    try:
        yield
    except HTTPError as e:
        status = e.res.status_code if e.res is not None else None
        if status == 403:
            raise AdSensePermissionError(f"Permission denied {action}: {e}") from e
        elif status == 404:
            raise AdSenseNotFoundError(f"Not found while {action}: {e}") from e
        else:
            raise AdSenseError(f"AdSense API error {action}: {e}") from e


class AsyncAdSenseApiService:
    """
    Async version of AdSenseApiService on top of aiogoogle.

    Usage:
        async with auth.get_async_service('adsense', 'v1.4') as (aiogoogle, api):
            adsense = AsyncAdSenseApiService(aiogoogle, api)
            accounts = await adsense.list_accounts()
    """

    def __init__(self, aiogoogle: Any, api: Any, max_page_size: int = DEFAULT_MAX_PAGE_SIZE):
        self._aiogoogle = aiogoogle
        self._api = api
        self._max_page_size = max_page_size

    async def _list_all(self, list_method: Callable, parse: Callable[[dict], Any], description: str, **params) -> list:
        async def fetch(page_token: Optional[str], page_size: Optional[int]) -> Page:
            request_params = dict(params, maxResults=page_size)
            if page_token:
                request_params['pageToken'] = page_token
            response = await self._aiogoogle.as_user(list_method(**request_params))
            return Page.from_response(response)

        results = []
        async with async_adsense_errors(f"listing {description}"):
            async for page in aiter_token_pages(fetch, page_size=self._max_page_size):
                for item in page.items:
                    try:
                        results.append(parse(item))
                    except (KeyError, TypeError, ValueError) as e:
                        logger.warning("Skipping invalid %s item: %s", description, e)

        logger.info("Retrieved %d %s (async)", len(results), description)
        return results

    async def list_accounts(self) -> List[Account]:
        """Fetches all AdSense accounts for the logged in user asynchronously."""
        return await self._list_all(self._api.accounts.list, utils.from_google_account, "accounts")

    async def list_ad_clients(self, account_id: Optional[str] = None) -> List[AdClient]:
        if account_id:
            return await self._list_all(
                self._api.accounts.adclients.list, utils.from_google_ad_client,
                "ad clients", accountId=account_id
            )
        return await self._list_all(self._api.adclients.list, utils.from_google_ad_client, "ad clients")

    async def generate_report_with_paging(
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
        Generates a report page by page asynchronously and merges the pages.

        Returns:
            The merged ReportTable.
        """
        params = build_report_params(ad_client_id, date_range, metrics, dimensions, sort, filters)
        logger.info("Running paginated report for ad client %s over %s (async)", ad_client_id, date_range)

        async def fetch(start_index: int, max_results: int) -> Page:
            response = await self._aiogoogle.as_user(
                self._api.reports.generate(startIndex=start_index, maxResults=max_results, **params)
            )
            return Page.from_response(response, items_key='rows')

        table = ReportTable()
        async with async_adsense_errors("generating paginated report"):
            async for page in aiter_offset_pages(fetch, page_size or self._max_page_size, row_limit):
                table.extend(page_to_table(page))

        if fill_gaps:
            fill_date_gaps(table, date_range)
        return table
