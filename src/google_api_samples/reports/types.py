from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import ValidationError
from ..paging.types import parse_total_matched_rows
from ..utils.dates import (
    days_ago, format_date, iter_days, iter_months, parse_date, today_local_timezone
)


@dataclass
class ReportHeader:
    """
    Describes one column of a generated report.
    Args:
        name: Dimension or metric name, e.g. 'DATE' or 'EARNINGS'.
        type: Column kind reported by the API (DIMENSION, METRIC_TALLY, METRIC_CURRENCY, ...).
        currency: ISO currency code for currency metrics.
    """
    name: str
    type: Optional[str] = None
    currency: Optional[str] = None

    @staticmethod
    def from_google_header(google_header: Dict[str, Any]) -> "ReportHeader":
        return ReportHeader(
            name=google_header.get("name"),
            type=google_header.get("type"),
            currency=google_header.get("currency"),
        )


@dataclass
class ReportTable:
    """
    A tabular report: ordered headers and string rows, one cell per header.
    Args:
        headers: Column descriptions in response order.
        rows: Report rows; every row has exactly len(headers) cells.
        totals: Totals row, when the API returns one.
        averages: Averages row, when the API returns one.
        total_matched_rows: Number of rows the report matched server-side.
        warnings: Warnings attached to the response.
    """
    headers: List[ReportHeader] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)
    totals: Optional[List[str]] = None
    averages: Optional[List[str]] = None
    total_matched_rows: Optional[int] = None
    warnings: List[str] = field(default_factory=list)

    def __post_init__(self):
        for row in self.rows:
            self._check_row(row)

    def _check_row(self, row: List[str]) -> None:
        if len(row) != len(self.headers):
            raise ValidationError(
                f"Row has {len(row)} cells but the report has {len(self.headers)} headers"
            )

    @property
    def header_names(self) -> List[str]:
        return [header.name for header in self.headers]

    def has_column(self, name: str) -> bool:
        return name in self.header_names

    def column_index(self, name: str) -> int:
        """
        Returns the position of the named column.
        Raises:
            KeyError: If the report has no such column.
        """
        try:
            return self.header_names.index(name)
        except ValueError:
            raise KeyError(name)

    def column_values(self, name: str) -> List[str]:
        index = self.column_index(name)
        return [row[index] for row in self.rows]

    def add_row(self, row: List[str]) -> None:
        self._check_row(row)
        self.rows.append(list(row))

    def extend(self, other: "ReportTable") -> "ReportTable":
        """
        Appends the rows of another page of the same report.
        Args:
            other: A later page; its headers must match this table's.
        Returns:
            This table, for chaining.
        """
        if not self.headers:
            self.headers = list(other.headers)
        elif other.headers and other.header_names != self.header_names:
            raise ValidationError("Cannot merge report pages with different headers")

        for row in other.rows:
            self.add_row(row)

        if self.total_matched_rows is None:
            self.total_matched_rows = other.total_matched_rows
        self.totals = self.totals or other.totals
        self.averages = self.averages or other.averages
        self.warnings.extend(w for w in other.warnings if w not in self.warnings)
        return self

    def is_empty(self) -> bool:
        return not self.rows

    @staticmethod
    def from_response(response: Optional[Dict[str, Any]]) -> "ReportTable":
        """
        Creates a ReportTable from a reports.generate response.
        Args:
            response: The response dictionary.
        Returns:
            A ReportTable populated with the response data.
        Raises:
            PaginationError: If totalMatchedRows is not an integer.
        """
        response = response or {}
        return ReportTable(
            headers=[ReportHeader.from_google_header(h) for h in response.get("headers") or []],
            rows=[list(row) for row in response.get("rows") or []],
            totals=response.get("totals"),
            averages=response.get("averages"),
            total_matched_rows=parse_total_matched_rows(response.get("totalMatchedRows")),
            warnings=list(response.get("warnings") or []),
        )


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive range of calendar dates.
    Args:
        start: First day of the range.
        end: Last day of the range; must not precede start.
    """
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValidationError(
                f"Start date {format_date(self.start)} is after end date {format_date(self.end)}"
            )

    @classmethod
    def from_strings(cls, start: str, end: str) -> "DateRange":
        try:
            return cls(parse_date(start), parse_date(end))
        except ValueError as e:
            raise ValidationError(f"Invalid date, expected yyyy-MM-dd: {e}")

    @classmethod
    def last_days(cls, days: int, today: Optional[date] = None) -> "DateRange":
        """
        Range covering the given number of days back from today, today included.
        Args:
            days: How many days to go back.
            today: Override for the current local date.
        """
        if days < 0:
            raise ValidationError("days cannot be negative")
        today = today or today_local_timezone()
        return cls(days_ago(days, today), today)

    def days(self) -> Iterator[date]:
        return iter_days(self.start, self.end)

    def months(self) -> Iterator[date]:
        return iter_months(self.start, self.end)

    def to_api_params(self) -> Dict[str, str]:
        return {"startDate": format_date(self.start), "endDate": format_date(self.end)}

    def __str__(self):
        return f"{format_date(self.start)}..{format_date(self.end)}"
