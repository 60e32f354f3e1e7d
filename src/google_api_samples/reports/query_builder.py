from typing import Iterator, List, Optional, TYPE_CHECKING
import logging

from ..exceptions import ValidationError
from ..paging import DEFAULT_ROW_LIMIT
from .types import DateRange, ReportTable

if TYPE_CHECKING:
    from ..services.adsense.api_service import AdSenseApiService

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE_LIMIT = 5000


class ReportQueryBuilder:
    """
    Builder pattern for constructing AdSense report requests with a fluent API.

    Example usage:
        report = (adsense.query()
            .for_ad_client("ca-pub-1234567890")
            .last_days(7)
            .metrics("PAGE_VIEWS", "EARNINGS")
            .dimensions("DATE")
            .sort("+DATE")
            .fill_gaps()
            .execute_paged())
    """

    def __init__(self, api_service: "AdSenseApiService"):
        self._api_service = api_service
        self._ad_client_id: Optional[str] = None
        self._date_range: Optional[DateRange] = None
        self._metrics: List[str] = []
        self._dimensions: List[str] = []
        self._sort: List[str] = []
        self._filters: List[str] = []
        self._page_size: Optional[int] = None
        self._row_limit: int = DEFAULT_ROW_LIMIT
        self._fill_gaps: bool = False

    def for_ad_client(self, ad_client_id: str) -> "ReportQueryBuilder":
        """
        Restrict the report to one ad client.
        Args:
            ad_client_id: The ad client ID, e.g. 'ca-pub-1234567890'
        Returns:
            Self for method chaining
        """
        if not ad_client_id:
            raise ValidationError("Ad client ID cannot be empty")
        self._ad_client_id = ad_client_id
        return self

    def date_range(self, date_range: DateRange) -> "ReportQueryBuilder":
        self._date_range = date_range
        return self

    def between(self, start: str, end: str) -> "ReportQueryBuilder":
        """
        Set the report range from yyyy-MM-dd strings.
        Args:
            start: First day, inclusive
            end: Last day, inclusive
        Returns:
            Self for method chaining
        """
        self._date_range = DateRange.from_strings(start, end)
        return self

    def last_days(self, days: int) -> "ReportQueryBuilder":
        self._date_range = DateRange.last_days(days)
        return self

    def metrics(self, *metrics: str) -> "ReportQueryBuilder":
        self._metrics.extend(metrics)
        return self

    def dimensions(self, *dimensions: str) -> "ReportQueryBuilder":
        self._dimensions.extend(dimensions)
        return self

    def sort(self, *sort: str) -> "ReportQueryBuilder":
        """
        Add sort keys, e.g. '+DATE' or '-EARNINGS'.
        Returns:
            Self for method chaining
        """
        self._sort.extend(sort)
        return self

    def filter(self, expression: str) -> "ReportQueryBuilder":
        self._filters.append(expression)
        return self

    def page_size(self, size: int) -> "ReportQueryBuilder":
        if size < 1 or size > MAX_PAGE_SIZE_LIMIT:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE_LIMIT}")
        self._page_size = size
        return self

    def row_limit(self, limit: int) -> "ReportQueryBuilder":
        if limit < 1:
            raise ValidationError("Row limit must be a positive integer")
        self._row_limit = limit
        return self

    def fill_gaps(self, enabled: bool = True) -> "ReportQueryBuilder":
        """Insert placeholder rows for days and months missing from the result."""
        self._fill_gaps = enabled
        return self

    def _require_date_range(self) -> DateRange:
        if self._date_range is None:
            raise ValidationError("A date range is required; use between(), last_days() or date_range()")
        return self._date_range

    def _request_kwargs(self) -> dict:
        kwargs = {
            "ad_client_id": self._ad_client_id,
            "date_range": self._require_date_range(),
            "filters": self._filters,
        }
        if self._metrics:
            kwargs["metrics"] = self._metrics
        if self._dimensions:
            kwargs["dimensions"] = self._dimensions
        if self._sort:
            kwargs["sort"] = self._sort
        return kwargs

    def execute(self) -> ReportTable:
        """
        Run the report in a single request.
        Returns:
            The generated report
        """
        logger.info("Executing report query: %s", self)
        return self._api_service.generate_report(fill_gaps=self._fill_gaps, **self._request_kwargs())

    def pages(self) -> Iterator[ReportTable]:
        """Yield the report one page at a time."""
        return self._api_service.iter_report_pages(
            page_size=self._page_size,
            row_limit=self._row_limit,
            **self._request_kwargs()
        )

    def execute_paged(self) -> ReportTable:
        """
        Run the report page by page and merge the pages.
        Returns:
            The merged report
        """
        logger.info("Executing paged report query: %s", self)
        return self._api_service.generate_report_with_paging(
            page_size=self._page_size,
            row_limit=self._row_limit,
            fill_gaps=self._fill_gaps,
            **self._request_kwargs()
        )

    def __repr__(self):
        return (
            f"ReportQueryBuilder(ad_client_id={self._ad_client_id!r}, date_range={self._date_range}, "
            f"metrics={self._metrics}, dimensions={self._dimensions}, page_size={self._page_size}, "
            f"row_limit={self._row_limit}, fill_gaps={self._fill_gaps})"
        )
