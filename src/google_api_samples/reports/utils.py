"""Collection of utilities to display and build report requests."""

from typing import Iterable, List

from ..utils.console import format_columns
from .types import ReportTable


def escape_filter_parameter(parameter: str) -> str:
    """
    Escape special characters for a parameter being used in a report filter.

    Args:
        parameter: The raw filter value.

    Returns:
        The value with backslashes and commas escaped.
    """
    return parameter.replace("\\", "\\\\").replace(",", "\\,")


def ad_client_filter(ad_client_id: str) -> str:
    return "AD_CLIENT_ID==" + escape_filter_parameter(ad_client_id)


def format_headers(table: ReportTable) -> str:
    return format_columns(table.header_names)


def format_rows(rows: Iterable[List[str]]) -> List[str]:
    return [format_columns(row) for row in rows]


def display_report(table: ReportTable) -> None:
    """Prints the report headers followed by every row."""
    if table.is_empty():
        print("No rows returned.")
        return

    print(format_headers(table))
    for line in format_rows(table.rows):
        print(line)
