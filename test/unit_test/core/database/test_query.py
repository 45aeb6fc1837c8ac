"""Tests for the search query pipeline: filtering, sorting and paging."""

from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from project_management_api.core.database.entities import User
from project_management_api.core.database.query import (
    MAX_PAGE_SIZE,
    PageRequest,
    PageResult,
    QueryBuilder,
    SortFieldError,
    SortKeys,
    contains_text,
)
from project_management_api.core.database.repositories import CommentRepository, UserRepository
from project_management_api.core.validation import ValidationFailed

USER_SORT_KEYS = SortKeys({"id": User.id, "username": User.username, "firstName": User.first_name}, tiebreaker=User.id)


class TestPageRequest:
    """Tests for building page requests from query parameters."""

    def test_defaults(self):
        page = PageRequest.from_params()
        assert (page.page_number, page.page_size, page.sort_by, page.sort_direction) == (1, 10, "Id", "asc")
        assert page.offset == 0

    @pytest.mark.parametrize("requested,effective", [(1000, MAX_PAGE_SIZE), (51, 50), (50, 50), (0, 1), (-5, 1)])
    def test_page_size_is_clamped(self, requested, effective):
        assert PageRequest.from_params(page_size=requested).page_size == effective

    def test_offset(self):
        assert PageRequest.from_params(page_number=3, page_size=20).offset == 40

    def test_direction_is_normalised(self):
        assert PageRequest.from_params(sort_direction="DESC").descending

    def test_invalid_page_number(self):
        with pytest.raises(ValidationFailed) as exc_info:
            PageRequest.from_params(page_number=0)
        assert exc_info.value.errors[0].field == "pageNumber"


class TestPageResult:
    """Tests for the page navigation numbers."""

    @pytest.mark.parametrize(
        "page_number,page_size,total,pages,has_prev,has_next",
        [
            (1, 10, 0, 0, False, False),
            (1, 10, 10, 1, False, False),
            (1, 10, 11, 2, False, True),
            (2, 10, 11, 2, True, False),
            (5, 10, 11, 2, True, False),
        ],
    )
    def test_navigation(self, page_number, page_size, total, pages, has_prev, has_next):
        result = PageResult(items=[], page_number=page_number, page_size=page_size, total_count=total)
        assert result.total_pages == pages
        assert result.has_previous is has_prev
        assert result.has_next is has_next

    def test_map_keeps_numbers(self):
        result = PageResult(items=[1, 2], page_number=2, page_size=2, total_count=5).map(str)
        assert result.items == ["1", "2"]
        assert (result.page_number, result.page_size, result.total_count) == (2, 2, 5)


class TestSortKeys:
    """Tests for the sort key allow-list."""

    @pytest.mark.parametrize("key", ["firstName", "FirstName", "first_name", "FIRSTNAME"])
    def test_matching_ignores_case_and_underscores(self, key):
        assert USER_SORT_KEYS.resolve(key) is USER_SORT_KEYS.columns["firstName"]

    def test_unknown_key(self):
        with pytest.raises(SortFieldError) as exc_info:
            USER_SORT_KEYS.resolve("passwordHash")
        error = exc_info.value.errors[0]
        assert error.field == "sortBy"
        assert "passwordHash" in error.message
        assert "username" in error.message


class TestQueryBuilder:
    """Tests running the pipeline against SQLite."""

    @pytest.fixture
    async def users(self, make_user):
        names = ["carol", "alice", "Bob", "dave", "erin", "frank", "grace"]
        return [await make_user(name, first_name=name.capitalize()) for name in names]

    def test_apply_filters_skips_absent_criteria(self):
        stmt = QueryBuilder.apply_filters(select(User), [None, User.is_admin == True, None])  # noqa: E712
        assert "is_admin" in str(stmt)
        assert str(QueryBuilder.apply_filters(select(User), [None, None])) == str(select(User))

    async def test_paginate_sorts_and_counts(self, session, users):
        page = PageRequest.from_params(page_number=2, page_size=3, sort_by="username")
        result = await QueryBuilder.paginate(session, select(User), page, USER_SORT_KEYS)

        assert result.total_count == 7
        assert result.total_pages == 3
        # Binary ordering: Bob, alice, carol, dave, erin, frank, grace.
        assert [u.username for u in result.items] == ["dave", "erin", "frank"]

    async def test_paginate_descending(self, session, users):
        page = PageRequest.from_params(page_size=2, sort_by="Username", sort_direction="desc")
        result = await QueryBuilder.paginate(session, select(User), page, USER_SORT_KEYS)
        assert [u.username for u in result.items] == ["grace", "frank"]

    async def test_unknown_sort_key_raises_before_querying(self, session, users):
        page = PageRequest.from_params(sort_by="nope")
        with pytest.raises(SortFieldError):
            await QueryBuilder.paginate(session, select(User), page, USER_SORT_KEYS)

    @pytest.mark.parametrize("page_number,page_size", [(1, 3), (3, 3), (4, 3), (1, 50), (2, 7), (9, 1)])
    async def test_item_count_matches_formula(self, session, users, page_number, page_size):
        page = PageRequest.from_params(page_number=page_number, page_size=page_size)
        result = await QueryBuilder.paginate(session, select(User), page, USER_SORT_KEYS)
        expected = max(0, min(page_size, result.total_count - (page_number - 1) * page_size))
        assert len(result.items) == expected

    async def test_contains_text_is_case_sensitive(self, session, users):
        stmt = QueryBuilder.apply_filters(select(User), [contains_text(User.username, "bo")])
        page = PageRequest.from_params()
        result = await QueryBuilder.paginate(session, stmt, page, USER_SORT_KEYS)
        assert result.items == []

        stmt = QueryBuilder.apply_filters(select(User), [contains_text(User.username, "Bo")])
        result = await QueryBuilder.paginate(session, stmt, page, USER_SORT_KEYS)
        assert [u.username for u in result.items] == ["Bob"]


class TestRepositorySearch:
    """Search methods of the repositories."""

    async def test_user_search_filters(self, session, make_user):
        await make_user("alice", first_name="Alice", is_admin=True)
        await make_user("alina", first_name="Alina")
        await make_user("bob", first_name="Bob")

        repo = UserRepository(session)
        result = await repo.search(PageRequest.from_params(), username="ali")
        assert [u.username for u in result.items] == ["alice", "alina"]

        result = await repo.search(PageRequest.from_params(), username="ali", is_admin=False)
        assert [u.username for u in result.items] == ["alina"]

    async def test_comment_search_by_date_range_is_inclusive(
        self, session, make_user, make_project, make_comment
    ):
        author = await make_user("author")
        project = await make_project(author)
        start = datetime(2026, 1, 1, 12, 0, 0)
        for day in range(4):
            await make_comment(author, project, f"day {day}", created_at=start + timedelta(days=day))

        repo = CommentRepository(session)
        result = await repo.search(
            PageRequest.from_params(sort_by="createdAt"),
            from_date=start + timedelta(days=1),
            to_date=start + timedelta(days=2),
        )
        assert [c.content for c in result.items] == ["day 1", "day 2"]
