"""Pager — page window and page metadata for every listing endpoint.

Invariants:
    - page_number is always within [1, MAX_PAGE_NUMBER] after normalization
    - page_size is always within [1, MAX_PAGE_SIZE] after normalization
    - total_pages = max(1, ceil(total_count / page_size))
    - has_previous_page iff page_number > 1
    - has_next_page iff page_number < total_pages

Design Decisions:
    - Malformed or below-range page params fall back to defaults, oversized
      ones are capped at the ceiling; neither is rejected, listing endpoints
      always answer
    - Raw params arrive as strings (query string), so normalization lives here
      rather than in the Pydantic layer
"""

import math
from dataclasses import dataclass

from app.core.domain_types import (
    DEFAULT_PAGE_NUMBER, DEFAULT_PAGE_SIZE, MAX_PAGE_NUMBER, MAX_PAGE_SIZE,
)


@dataclass(frozen=True)
class ListingQuery:
    """Normalized listing request."""
    page_number: int = DEFAULT_PAGE_NUMBER
    page_size: int = DEFAULT_PAGE_SIZE
    sort: str | None = None
    search: str | None = None


@dataclass(frozen=True)
class PageMeta:
    """Pagination metadata returned alongside a page of data."""
    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool


def normalize_page_param(
    raw: str | int | None, default: int, maximum: int | None = None,
) -> int:
    """Parse a page param.

    Absent, non-numeric or < 1 falls back to `default`; above `maximum` is
    capped at `maximum`.
    """
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    if value < 1:
        return default
    if maximum is not None:
        return min(value, maximum)
    return value


def normalize_query(
    page_number: str | int | None = None,
    page_size: str | int | None = None,
    sort: str | None = None,
    search: str | None = None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> ListingQuery:
    """Build a ListingQuery from raw request params."""
    default_page_size = _clamp(default_page_size, MAX_PAGE_SIZE)
    return ListingQuery(
        page_number=normalize_page_param(
            page_number, DEFAULT_PAGE_NUMBER, MAX_PAGE_NUMBER,
        ),
        page_size=normalize_page_param(page_size, default_page_size, MAX_PAGE_SIZE),
        sort=sort or None,
        search=search or None,
    )


def _clamp(value: int, maximum: int) -> int:
    return min(max(1, value), maximum)


def compute_window(page_number: int, page_size: int) -> tuple[int, int]:
    """Return (limit, offset) for params clamped into their valid ranges."""
    page_number = _clamp(page_number, MAX_PAGE_NUMBER)
    page_size = _clamp(page_size, MAX_PAGE_SIZE)
    return page_size, (page_number - 1) * page_size


def compute_meta(total_count: int, page_number: int, page_size: int) -> PageMeta:
    """Compute page metadata from the total record count."""
    page_number = _clamp(page_number, MAX_PAGE_NUMBER)
    page_size = _clamp(page_size, MAX_PAGE_SIZE)
    total_pages = max(1, math.ceil(total_count / page_size))
    return PageMeta(
        page_number=page_number,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages,
        has_previous_page=page_number > 1,
        has_next_page=page_number < total_pages,
    )
