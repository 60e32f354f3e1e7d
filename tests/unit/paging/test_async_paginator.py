import pytest
from unittest.mock import AsyncMock, Mock

from google_api_samples.exceptions import ValidationError
from google_api_samples.paging import (
    Page, aiter_token_pages, aiter_offset_pages, aconsume_pages
)


async def collect(pages):
    return [page async for page in pages]


@pytest.mark.unit
@pytest.mark.paging
class TestAsyncPagination:
    """Test cases for the async paginators."""

    @pytest.mark.asyncio
    async def test_token_pages(self):
        pages = {
            None: Page(items=[1, 2], next_page_token="A"),
            "A": Page(items=[3, 4], next_page_token="B"),
            "B": Page(items=[5]),
        }
        fetch = AsyncMock(side_effect=lambda token, size: pages[token])

        result = await collect(aiter_token_pages(fetch, page_size=2))

        assert [p.items for p in result] == [[1, 2], [3, 4], [5]]
        assert [c.args for c in fetch.await_args_list] == [(None, 2), ("A", 2), ("B", 2)]

    @pytest.mark.asyncio
    async def test_offset_pages_respect_row_limit(self):
        rows = list(range(100))
        fetch = AsyncMock(
            side_effect=lambda start, size: Page(items=rows[start:start + size], total_matched_rows=100)
        )

        result = await collect(aiter_offset_pages(fetch, page_size=15, row_limit=40))

        assert sum(len(p) for p in result) == 40
        assert [c.args for c in fetch.await_args_list] == [(0, 15), (15, 15), (30, 10)]

    @pytest.mark.asyncio
    async def test_offset_pages_stop_on_empty_page(self):
        fetch = AsyncMock(return_value=Page(items=[], total_matched_rows=0))
        assert await collect(aiter_offset_pages(fetch, page_size=10)) == []
        fetch.assert_awaited_once_with(0, 10)

    @pytest.mark.asyncio
    async def test_consume_with_sync_consumer(self):
        fetch = AsyncMock(side_effect=[Page(items=[1], next_page_token="A"), Page(items=[2, 3])])
        consumer = Mock()

        total = await aconsume_pages(aiter_token_pages(fetch), consumer)

        assert total == 3
        assert consumer.call_count == 2

    @pytest.mark.asyncio
    async def test_consume_with_async_consumer(self):
        fetch = AsyncMock(side_effect=[Page(items=[1], next_page_token="A"), Page(items=[2])])
        consumer = AsyncMock()

        total = await aconsume_pages(aiter_token_pages(fetch), consumer)

        assert total == 2
        assert consumer.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_arguments(self):
        with pytest.raises(ValidationError):
            await collect(aiter_offset_pages(AsyncMock(), page_size=0))
        with pytest.raises(ValidationError):
            await collect(aiter_token_pages(AsyncMock(), page_size=-5))

    @pytest.mark.asyncio
    async def test_token_pages_follow_empty_page_with_token(self):
        fetch = AsyncMock(side_effect=[
            Page(items=[1], next_page_token="A"),
            Page(items=[], next_page_token="B"),
            Page(items=[2, 3]),
        ])
        result = await collect(aiter_token_pages(fetch))
        assert [p.items for p in result] == [[1], [], [2, 3]]

    @pytest.mark.asyncio
    async def test_token_pages_stop_on_empty(self):
        fetch = AsyncMock(side_effect=[
            Page(items=[1], next_page_token="A"),
            Page(items=[], next_page_token="B"),
        ])
        result = await collect(aiter_token_pages(fetch, stop_on_empty=True))
        assert len(result) == 2
        assert fetch.await_count == 2
