"""Report tables, date ranges and gap filling."""

from .types import ReportHeader, ReportTable, DateRange
from .gap_filler import fill_date_gaps, DATE_COLUMN, MONTH_COLUMN, PLACEHOLDER
from .utils import escape_filter_parameter, ad_client_filter, format_headers, format_rows, display_report
from .query_builder import ReportQueryBuilder

__all__ = [
    "ReportHeader",
    "ReportTable",
    "DateRange",
    "fill_date_gaps",
    "DATE_COLUMN",
    "MONTH_COLUMN",
    "PLACEHOLDER",
    "escape_filter_parameter",
    "ad_client_filter",
    "format_headers",
    "format_rows",
    "display_report",
    "ReportQueryBuilder",
]
