"""Console output helpers shared by the sample commands."""

from typing import Iterable

BANNER_WIDTH = 65
COLUMN_WIDTH = 25


def banner(title: str) -> str:
    """
    Builds the three-line banner printed before each sample section.

    Args:
        title: Text shown between the separator lines.

    Returns:
        The banner as a single string.
    """
    separator = "=" * BANNER_WIDTH
    return f"{separator}\n{title}\n{separator}"


def print_banner(title: str) -> None:
    print(banner(title))


def format_columns(values: Iterable, width: int = COLUMN_WIDTH) -> str:
    """Left-aligns each value in a fixed-width column."""
    return "".join(f"{str(value):<{width}}" for value in values).rstrip()
