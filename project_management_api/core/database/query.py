"""
Query shaping for search endpoints.

Search endpoints share one pipeline over a SQLAlchemy ``Select``:

1. ``QueryBuilder.apply_filters`` narrows the statement with whichever criteria
   the caller supplied (absent criteria are skipped),
2. ``QueryBuilder.apply_sort`` orders it by one allow-listed column,
3. ``QueryBuilder.paginate`` counts the filtered rows and fetches one page.

Sort keys are resolved through a ``SortKeys`` mapping. Matching ignores case
and underscores, so ``CreatedAt``, ``createdAt`` and ``created_at`` name the
same column. Unknown keys raise ``SortFieldError``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, TypeVar

from sqlalchemy import Boolean, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql import ColumnElement, Select
from sqlalchemy.sql.functions import FunctionElement

from project_management_api.core.validation import (
    FieldError,
    MAX_PAGE_SIZE,
    ValidationFailed,
    ensure_valid,
    validate_page_request,
)

DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT_KEY = "Id"
DEFAULT_SORT_DIRECTION = "asc"

T = TypeVar("T")
R = TypeVar("R")


class SortFieldError(ValidationFailed):
    """The requested sort key is not sortable for this resource."""

    def __init__(self, sort_by: str, allowed: Sequence[str]):
        self.sort_by = sort_by
        self.allowed = list(allowed)
        super().__init__(
            [FieldError("sortBy", f"Unknown sort field '{sort_by}'. Allowed: {', '.join(self.allowed)}")]
        )


# =====================================================================
# Case-sensitive substring match
# =====================================================================


class contains_text(FunctionElement):
    """``haystack`` contains ``needle``, compared case-sensitively on every backend.

    ``LIKE`` is case-insensitive on SQLite for ASCII, so the match is compiled
    to a position lookup instead.
    """

    type = Boolean()
    name = "contains_text"
    inherit_cache = True


@compiles(contains_text)
def _compile_contains_text(element, compiler, **kw):
    haystack, needle = list(element.clauses)
    return "POSITION(%s IN %s) > 0" % (compiler.process(needle, **kw), compiler.process(haystack, **kw))


@compiles(contains_text, "sqlite")
def _compile_contains_text_sqlite(element, compiler, **kw):
    haystack, needle = list(element.clauses)
    return "instr(%s, %s) > 0" % (compiler.process(haystack, **kw), compiler.process(needle, **kw))


# =====================================================================
# Page request / result
# =====================================================================


@dataclass(frozen=True)
class PageRequest:
    """Validated paging and sorting parameters.

    Build instances with ``PageRequest.from_params``, which applies defaults,
    clamps the page size into ``[1, MAX_PAGE_SIZE]`` and rejects invalid values.
    """

    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_by: str = DEFAULT_SORT_KEY
    sort_direction: str = DEFAULT_SORT_DIRECTION

    @classmethod
    def from_params(
        cls,
        page_number: Optional[int] = None,
        page_size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> "PageRequest":
        ensure_valid(validate_page_request(page_number, sort_by, sort_direction))
        size = DEFAULT_PAGE_SIZE if page_size is None else min(max(page_size, 1), MAX_PAGE_SIZE)
        return cls(
            page_number=page_number or 1,
            page_size=size,
            sort_by=sort_by or DEFAULT_SORT_KEY,
            sort_direction=(sort_direction or DEFAULT_SORT_DIRECTION).lower(),
        )

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size

    @property
    def descending(self) -> bool:
        return self.sort_direction == "desc"


@dataclass
class PageResult(Generic[T]):
    """One page of results plus the numbers needed to navigate the rest."""

    items: List[T]
    page_number: int
    page_size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    def map(self, fn: Callable[[T], R]) -> "PageResult[R]":
        """Return the same page with every item passed through ``fn``."""
        return PageResult(
            items=[fn(item) for item in self.items],
            page_number=self.page_number,
            page_size=self.page_size,
            total_count=self.total_count,
        )


# =====================================================================
# Sort key allow-list
# =====================================================================


def normalize_sort_key(key: str) -> str:
    return key.replace("_", "").lower()


@dataclass
class SortKeys:
    """Allow-list of sortable keys for one resource.

    Args:
        columns: Sort key (as exposed on the wire) to column or SQL expression.
            Several keys may point at the same column.
        tiebreaker: Column appended to every ordering so pages are stable.
    """

    columns: Mapping[str, ColumnElement[Any]]
    tiebreaker: Optional[ColumnElement[Any]] = None
    _lookup: dict = field(init=False, repr=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._lookup = {normalize_sort_key(key): column for key, column in self.columns.items()}

    @property
    def allowed(self) -> List[str]:
        return list(self.columns)

    def resolve(self, sort_by: str) -> ColumnElement[Any]:
        try:
            return self._lookup[normalize_sort_key(sort_by)]
        except KeyError:
            raise SortFieldError(sort_by, self.allowed) from None


# =====================================================================
# Query builder
# =====================================================================


class QueryBuilder:
    """Utility class for shaping SQLAlchemy select statements."""

    @staticmethod
    def apply_filters(stmt: Select, criteria: Sequence[Optional[ColumnElement[bool]]]) -> Select:
        """Apply filter criteria to a select statement.

        Args:
            stmt: Select statement
            criteria: Boolean SQL expressions; ``None`` entries (absent filters) are skipped

        Returns:
            Modified select statement with every present criterion AND-ed in
        """
        for criterion in criteria:
            if criterion is not None:
                stmt = stmt.where(criterion)
        return stmt

    @staticmethod
    def apply_sort(stmt: Select, sort_keys: SortKeys, sort_by: str, descending: bool = False) -> Select:
        """Order a select statement by one allow-listed key.

        Args:
            stmt: Select statement
            sort_keys: Allow-list of sortable keys for the resource
            sort_by: Requested key, matched ignoring case and underscores
            descending: Sort direction

        Returns:
            Modified select statement with ordering applied

        Raises:
            SortFieldError: If ``sort_by`` is not in the allow-list
        """
        column = sort_keys.resolve(sort_by)
        stmt = stmt.order_by(column.desc() if descending else column.asc())
        if sort_keys.tiebreaker is not None:
            stmt = stmt.order_by(sort_keys.tiebreaker.asc())
        return stmt

    @staticmethod
    def apply_pagination(stmt: Select, limit: Optional[int], offset: Optional[int]) -> Select:
        """Apply limit/offset to a select statement.

        Args:
            stmt: Select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        return stmt

    @staticmethod
    async def count(session: AsyncSession, stmt: Select) -> int:
        """Count the rows a select statement would return, ignoring its ordering."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return (await session.execute(count_stmt)).scalar_one()

    @staticmethod
    async def paginate(
        session: AsyncSession,
        stmt: Select,
        page: PageRequest,
        sort_keys: SortKeys,
        options: Sequence[Any] = (),
    ) -> PageResult[Any]:
        """Sort a filtered statement and fetch one page of entities.

        Args:
            session: Async session to run the queries on
            stmt: Filtered select statement returning one entity per row
            page: Paging and sorting parameters
            sort_keys: Allow-list of sortable keys for the resource
            options: Loader options applied to the page query only

        Returns:
            The requested page; past the last page ``items`` is empty
        """
        sorted_stmt = QueryBuilder.apply_sort(stmt, sort_keys, page.sort_by, page.descending)
        total = await QueryBuilder.count(session, stmt)
        page_stmt = QueryBuilder.apply_pagination(sorted_stmt, page.page_size, page.offset)
        if options:
            page_stmt = page_stmt.options(*options)
        result = await session.execute(page_stmt)
        return PageResult(
            items=list(result.scalars().all()),
            page_number=page.page_number,
            page_size=page.page_size,
            total_count=total,
        )
