"""Token and offset pagination over Google list and report endpoints."""

from .types import Page
from .paginator import (
    DEFAULT_ROW_LIMIT, iter_token_pages, iter_offset_pages, consume_pages, collect_items
)
from .async_paginator import aiter_token_pages, aiter_offset_pages, aconsume_pages

__all__ = [
    "Page",
    "DEFAULT_ROW_LIMIT",
    "iter_token_pages",
    "iter_offset_pages",
    "consume_pages",
    "collect_items",
    "aiter_token_pages",
    "aiter_offset_pages",
    "aconsume_pages",
]
