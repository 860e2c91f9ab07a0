"""Listing Service — one paginated search/sort contract for every entity type.

Invariants:
    - Query is normalized before use (page 1 / size 10 when absent or malformed)
    - Caller scope filters are always ANDed with the search filter, never replaced
    - Only descriptor-whitelisted fields appear in `data`
    - Accessor failures propagate as DatabaseError; no retry

Design Decisions:
    - count and find are two independent reads with no shared transaction:
      a concurrent write between them can make `total_count` disagree with
      `data` for one response. Accepted, not corrected
    - Pure pieces (query builder, pager, projection) live in core/; this module
      only sequences the two awaits around them
"""

import logging
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import Sequence

from app.core.pager import ListingQuery, PageMeta, compute_meta, compute_window
from app.core.projection import EntityDescriptor, project
from app.core.query_builder import FieldFilter, build_query
from app.core.repository_protocols import EntityAccessor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageResult:
    """One page of projected records plus its metadata."""
    meta: PageMeta
    data: list[dict] = field(default_factory=list)

    @property
    def page_number(self) -> int:
        return self.meta.page_number

    @property
    def page_size(self) -> int:
        return self.meta.page_size

    @property
    def total_count(self) -> int:
        return self.meta.total_count

    @property
    def total_pages(self) -> int:
        return self.meta.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.meta.has_previous_page

    @property
    def has_next_page(self) -> bool:
        return self.meta.has_next_page

    def to_dict(self) -> dict:
        return {
            "page_number": self.page_number,
            "page_size": self.page_size,
            "count": self.total_count,
            "total_pages": self.total_pages,
            "has_previous_page": self.has_previous_page,
            "has_next_page": self.has_next_page,
            "data": self.data,
        }


async def list_page(
    accessor: EntityAccessor,
    query: ListingQuery,
    descriptor: EntityDescriptor,
    scope: Sequence[FieldFilter] = (),
    tz: tzinfo = timezone.utc,
) -> PageResult:
    """Count, fetch and project one page of `descriptor` records."""
    order, search_filters = build_query(
        query.sort, query.search, descriptor.searchable_fields, tz,
    )
    filters = (*scope, *search_filters)
    limit, offset = compute_window(query.page_number, query.page_size)

    total_count = await accessor.count(filters)
    records = await accessor.find(filters, order, limit, offset)

    logger.debug(
        f"Listed {len(records)}/{total_count} {descriptor.name} records",
        extra={"entity": descriptor.name},
    )
    return PageResult(
        meta=compute_meta(total_count, query.page_number, query.page_size),
        data=[project(record, descriptor) for record in records],
    )
