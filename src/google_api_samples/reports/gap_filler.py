"""
Fills missing days and months in sparse time-series reports.

Reporting APIs omit rows for periods without data. Charting and export code
usually wants one row per period, so synthetic rows are appended for every
missing day (DATE column) and month (MONTH column) in the requested range.
"""

import logging

from ..utils.dates import format_date, format_month
from .types import DateRange, ReportTable

logger = logging.getLogger(__name__)

DATE_COLUMN = "DATE"
MONTH_COLUMN = "MONTH"
PLACEHOLDER = "N/A"


def _placeholder_row(table: ReportTable) -> list:
    return [PLACEHOLDER] * len(table.headers)


def _fill_days(table: ReportTable, date_range: DateRange) -> int:
    date_index = table.column_index(DATE_COLUMN)
    month_index = table.column_index(MONTH_COLUMN) if table.has_column(MONTH_COLUMN) else None
    present = {row[date_index] for row in table.rows}

    added = 0
    for day in date_range.days():
        value = format_date(day)
        if value in present:
            continue
        row = _placeholder_row(table)
        row[date_index] = value
        if month_index is not None:
            row[month_index] = format_month(day)
        table.add_row(row)
        present.add(value)
        added += 1
    return added


def _fill_months(table: ReportTable, date_range: DateRange) -> int:
    month_index = table.column_index(MONTH_COLUMN)
    present = {row[month_index] for row in table.rows}

    added = 0
    for month in date_range.months():
        value = format_month(month)
        if value in present:
            continue
        row = _placeholder_row(table)
        row[month_index] = value
        table.add_row(row)
        present.add(value)
        added += 1
    return added


def fill_date_gaps(table: ReportTable, date_range: DateRange) -> ReportTable:
    """
    Appends placeholder rows for every day and month missing from the report.

    Original rows are left untouched and keep their position; synthetic rows
    follow them in calendar order with every other column set to 'N/A'.
    Tables without a DATE or MONTH column, or without any rows, are returned
    unchanged.

    Args:
        table: The report to fill, modified in place.
        date_range: The range the report was requested for.

    Returns:
        The same table, for chaining.
    """
    has_date = table.has_column(DATE_COLUMN)
    has_month = table.has_column(MONTH_COLUMN)

    if not (has_date or has_month):
        logger.debug("Report has no DATE or MONTH column, nothing to fill")
        return table
    if table.is_empty():
        logger.info("Report has no rows, not filling gaps")
        return table

    added_days = _fill_days(table, date_range) if has_date else 0
    added_months = _fill_months(table, date_range) if has_month else 0

    logger.info(
        "Filled %d missing days and %d missing months for %s",
        added_days, added_months, date_range
    )
    return table
