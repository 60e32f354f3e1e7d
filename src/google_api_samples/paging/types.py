from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import PaginationError


def parse_total_matched_rows(value: Any) -> Optional[int]:
    """
    Converts a response's totalMatchedRows, which reporting endpoints send as a string.
    Raises:
        PaginationError: If the value is not an integer.
    """
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise PaginationError(f"Invalid totalMatchedRows value: {value!r}")


@dataclass
class Page:
    """
    One server response to a list or report request.
    Args:
        items: Records on this page, in server order.
        next_page_token: Cursor for the following page; empty or None when there is none.
        total_matched_rows: Row count reported by row-indexed endpoints.
        raw: The untouched response body.
    """
    items: List[Any] = field(default_factory=list)
    next_page_token: Optional[str] = None
    total_matched_rows: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def has_items(self) -> bool:
        return bool(self.items)

    @property
    def has_next_page(self) -> bool:
        return bool(self.next_page_token)

    def __len__(self) -> int:
        return len(self.items)

    @staticmethod
    def from_response(response: Optional[Dict[str, Any]], items_key: str = "items") -> "Page":
        """
        Creates a Page from a Google API JSON response.
        Args:
            response: The response dictionary (may be None for an empty body).
            items_key: Key holding the records ('items' for listings, 'rows' for reports).
        Returns:
            A Page populated from the response.
        """
        response = response or {}

        return Page(
            items=list(response.get(items_key) or []),
            next_page_token=response.get("nextPageToken") or None,
            total_matched_rows=parse_total_matched_rows(response.get("totalMatchedRows")),
            raw=response,
        )
