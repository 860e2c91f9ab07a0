"""Listing Schemas — the paginated envelope shared by every list endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """Page envelope: metadata + projected records."""
    page_number: int
    page_size: int
    count: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool
    data: list[T]


class IdResponse(BaseModel):
    """Acknowledgement for updates and deletes."""
    id: str
