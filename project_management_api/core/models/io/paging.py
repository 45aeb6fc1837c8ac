"""
Page envelope returned by search endpoints.
"""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

from pydantic import Field

from project_management_api.core.database.query import PageResult

from .base import ApiModel

T = TypeVar("T")


class Page(ApiModel, Generic[T]):
    """One page of search results."""

    items: List[T] = Field(description="Items on this page")
    page_number: int = Field(description="1-based page index")
    page_size: int = Field(description="Effective page size after clamping")
    total_count: int = Field(description="Number of items matching the filters across all pages")
    total_pages: int = Field(description="ceil(totalCount / pageSize)")
    has_previous: bool
    has_next: bool

    @classmethod
    def from_result(cls, result: PageResult, mapper: Callable[[object], T]) -> "Page[T]":
        """Build the envelope from a repository page, converting each entity with ``mapper``."""
        return cls(
            items=[mapper(item) for item in result.items],
            page_number=result.page_number,
            page_size=result.page_size,
            total_count=result.total_count,
            total_pages=result.total_pages,
            has_previous=result.has_previous,
            has_next=result.has_next,
        )
