from datetime import date, datetime, timedelta
from typing import Iterator, Optional

import tzlocal

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"


def today_local_timezone() -> date:
    """
    Returns today's date in the local timezone.

    Returns:
        A date object for the current day.
    """
    return datetime.now(tzlocal.get_localzone()).date()


def format_date(value: date) -> str:
    """Formats a date the way the reporting APIs expect it (yyyy-MM-dd)."""
    return value.strftime(DATE_FORMAT)


def format_month(value: date) -> str:
    """Formats the year and month of a date (yyyy-MM)."""
    return value.strftime(MONTH_FORMAT)


def parse_date(value: str) -> date:
    """
    Parses a yyyy-MM-dd string into a date.

    Args:
        value: The date string.

    Returns:
        The parsed date.

    Raises:
        ValueError: If the string is not a valid yyyy-MM-dd date.
    """
    return datetime.strptime(value, DATE_FORMAT).date()


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """
    Moves a first-of-month date by a whole number of months.

    Args:
        value: A date; only its year and month are used.
        months: Number of months to move, may be negative.

    Returns:
        The first day of the resulting month.
    """
    month_index = value.year * 12 + (value.month - 1) + months
    return date(month_index // 12, month_index % 12 + 1, 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yields every calendar day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def iter_months(start: date, end: date) -> Iterator[date]:
    """Yields the first day of every month touched by [start, end]."""
    current = first_of_month(start)
    last = first_of_month(end)
    while current <= last:
        yield current
        current = add_months(current, 1)


def days_ago(days: int, today: Optional[date] = None) -> date:
    today = today or today_local_timezone()
    return today - timedelta(days=days)
