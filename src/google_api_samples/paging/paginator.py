"""
Cursor-based pagination over list and report endpoints.

Two cursor disciplines are supported:

* token cursors, where each page carries an opaque ``nextPageToken`` that is
  passed back verbatim to fetch the following page;
* offset cursors, where the caller advances a numeric ``startIndex`` by the
  number of rows received, bounded by the server's ``totalMatchedRows`` and a
  hard row limit.

Both are plain generators: pages are requested lazily, one at a time, in
cursor order. Errors raised by ``fetch`` propagate unchanged.
"""

import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional

from ..exceptions import ValidationError
from ..utils.log_sanitizer import sanitize_page_token
from .types import Page

logger = logging.getLogger(__name__)

# Reporting endpoints refuse to page past this many rows
DEFAULT_ROW_LIMIT = 5000

TokenFetch = Callable[[Optional[str], Optional[int]], Page]
OffsetFetch = Callable[[int, int], Page]


def validate_token_arguments(page_size: Optional[int]) -> None:
    if page_size is not None and page_size < 1:
        raise ValidationError("page_size must be a positive integer")


def validate_offset_arguments(page_size: int, row_limit: int, start_index: int) -> None:
    if page_size is None or page_size < 1:
        raise ValidationError("page_size must be a positive integer")
    if row_limit is None or row_limit < 1:
        raise ValidationError("row_limit must be a positive integer")
    if start_index < 0:
        raise ValidationError("start_index cannot be negative")


def next_token_or_stop(page: Page, current_token: Optional[str], stop_on_empty: bool = False) -> Optional[str]:
    """
    Decides where token pagination continues after ``page``.

    Args:
        page: The page just received.
        current_token: Token the page was requested with.
        stop_on_empty: End iteration on a page without items even if it carries a token.

    Returns:
        The token for the next request, or None when iteration must stop.
    """
    if stop_on_empty and not page.has_items:
        logger.info("Received an empty page, stopping")
        return None
    if not page.has_next_page:
        return None
    if page.next_page_token == current_token:
        logger.warning(
            "Server returned the page token it was given (%s), stopping",
            sanitize_page_token(current_token)
        )
        return None
    return page.next_page_token


def offset_request_size(page_size: int, total: int, index: int) -> int:
    """Rows to request so the final page does not overshoot ``total``."""
    return min(page_size, total - index)


def cap_page(page: Page, remaining: int) -> Page:
    """Drops rows a misbehaving server sent beyond the requested window."""
    if len(page.items) > remaining:
        logger.warning("Server returned %d rows, only %d requested", len(page.items), remaining)
        page.items = page.items[:remaining]
    return page


def iter_token_pages(
        fetch: TokenFetch,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        stop_on_empty: bool = False
) -> Iterator[Page]:
    """
    Iterates over every page of a token-paginated listing.

    Args:
        fetch: Callable ``fetch(page_token, page_size) -> Page``.
        page_size: Page-size hint passed to every request.
        page_token: Token to resume from; None starts at the first page.
        stop_on_empty: Also stop after a page with no items.

    Yields:
        Each page in server order. Iteration stops after a page without a
        next token, or when the server repeats a token. Empty pages that carry
        a token are followed unless ``stop_on_empty`` is set.
    """
    validate_token_arguments(page_size)

    page_number = 0
    while True:
        page_number += 1
        logger.debug(
            "Fetching page %d (page_token=%s, page_size=%s)",
            page_number, sanitize_page_token(page_token), page_size
        )
        page = fetch(page_token, page_size)
        yield page

        page_token = next_token_or_stop(page, page_token, stop_on_empty)
        if page_token is None:
            logger.info("Pagination finished after %d pages", page_number)
            return


def iter_offset_pages(
        fetch: OffsetFetch,
        page_size: int,
        row_limit: int = DEFAULT_ROW_LIMIT,
        start_index: int = 0
) -> Iterator[Page]:
    """
    Iterates over a row-indexed report, page by page.

    Args:
        fetch: Callable ``fetch(start_index, page_size) -> Page``.
        page_size: Maximum rows per request.
        row_limit: Hard cap on the number of rows read in total.
        start_index: Row to start from.

    Yields:
        Each non-empty page. An empty page ends iteration without error, since
        the report may shrink between requests.
    """
    validate_offset_arguments(page_size, row_limit, start_index)

    index = start_index
    limit = start_index + row_limit
    total = limit

    while index < total:
        request_size = offset_request_size(page_size, total, index)
        logger.debug("Fetching rows from index %d (page_size=%d)", index, request_size)
        page = fetch(index, request_size)

        if not page.has_items:
            if index > start_index:
                logger.warning("Report returned an empty page at index %d, stopping early", index)
            return

        if page.total_matched_rows is not None:
            total = min(page.total_matched_rows, limit)

        page = cap_page(page, limit - index)
        yield page
        index += len(page.items)

        if page.total_matched_rows is None and len(page.items) < request_size:
            # Without a total, a short page is the last one
            return

    logger.info("Read %d rows", index - start_index)


def consume_pages(pages: Iterable[Page], consumer: Callable[[Page], Any]) -> int:
    """
    Feeds each page to ``consumer``.

    Returns:
        Total number of items seen across all pages.
    """
    count = 0
    for page in pages:
        consumer(page)
        count += len(page.items)
    return count


def collect_items(pages: Iterable[Page]) -> List[Any]:
    """Flattens the items of every page into a single list."""
    items = []
    for page in pages:
        items.extend(page.items)
    return items
