"""Async counterparts of the paginators for aiogoogle-backed services."""

import inspect
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from ..utils.log_sanitizer import sanitize_page_token
from .paginator import (
    DEFAULT_ROW_LIMIT, cap_page, next_token_or_stop, offset_request_size,
    validate_offset_arguments, validate_token_arguments
)
from .types import Page

logger = logging.getLogger(__name__)

AsyncTokenFetch = Callable[[Optional[str], Optional[int]], Awaitable[Page]]
AsyncOffsetFetch = Callable[[int, int], Awaitable[Page]]


async def aiter_token_pages(
        fetch: AsyncTokenFetch,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
        stop_on_empty: bool = False
) -> AsyncIterator[Page]:
    """
    Async version of ``iter_token_pages``; ``fetch`` is awaited for every page.
    """
    validate_token_arguments(page_size)

    page_number = 0
    while True:
        page_number += 1
        logger.debug(
            "Fetching page %d (page_token=%s, page_size=%s) (async)",
            page_number, sanitize_page_token(page_token), page_size
        )
        page = await fetch(page_token, page_size)
        yield page

        page_token = next_token_or_stop(page, page_token, stop_on_empty)
        if page_token is None:
            logger.info("Pagination finished after %d pages (async)", page_number)
            return


async def aiter_offset_pages(
        fetch: AsyncOffsetFetch,
        page_size: int,
        row_limit: int = DEFAULT_ROW_LIMIT,
        start_index: int = 0
) -> AsyncIterator[Page]:
    """
    Async version of ``iter_offset_pages`` with the same termination rules.
    """
    validate_offset_arguments(page_size, row_limit, start_index)

    index = start_index
    limit = start_index + row_limit
    total = limit

    while index < total:
        request_size = offset_request_size(page_size, total, index)
        page = await fetch(index, request_size)

        if not page.has_items:
            if index > start_index:
                logger.warning("Report returned an empty page at index %d, stopping early (async)", index)
            return

        if page.total_matched_rows is not None:
            total = min(page.total_matched_rows, limit)

        page = cap_page(page, limit - index)
        yield page
        index += len(page.items)

        if page.total_matched_rows is None and len(page.items) < request_size:
            return


async def aconsume_pages(pages: AsyncIterator[Page], consumer: Callable[[Page], Any]) -> int:
    """
    Feeds each page to ``consumer``, awaiting it when it is a coroutine function.

    Returns:
        Total number of items seen across all pages.
    """
    count = 0
    async for page in pages:
        result = consumer(page)
        if inspect.isawaitable(result):
            await result
        count += len(page.items)
    return count
