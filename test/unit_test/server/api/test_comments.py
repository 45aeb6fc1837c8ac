"""API tests for comments and the shared search parameters."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def project(make_project, alice):
    return await make_project(alice, title="Website relaunch")


async def _post(client, headers, project_id, content):
    response = await client.post("/api/comments", json={"content": content, "projectId": project_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_create_comment(client: AsyncClient, bob, bob_headers, project):
    body = await _post(client, bob_headers, project.id, "Looks great")

    assert body["content"] == "Looks great"
    assert body["userId"] == bob.id
    assert body["username"] == "bob"
    assert body["projectTitle"] == "Website relaunch"
    assert body["createdAt"]


async def test_comment_on_missing_project(client: AsyncClient, alice_headers):
    response = await client.post("/api/comments", json={"content": "Hi", "projectId": 999}, headers=alice_headers)
    assert response.status_code == 404


@pytest.mark.parametrize("content", ["", "x" * 1001])
async def test_content_length(client: AsyncClient, alice_headers, project, content):
    response = await client.post(
        "/api/comments", json={"content": content, "projectId": project.id}, headers=alice_headers
    )
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "content"


async def test_only_author_can_edit(client: AsyncClient, alice_headers, bob_headers, project):
    comment = await _post(client, alice_headers, project.id, "First draft")

    forbidden = await client.put(f"/api/comments/{comment['id']}", json={"content": "Hijacked"}, headers=bob_headers)
    assert forbidden.status_code == 403

    edited = await client.put(f"/api/comments/{comment['id']}", json={"content": "Final"}, headers=alice_headers)
    assert edited.status_code == 200
    assert edited.json()["content"] == "Final"
    assert edited.json()["createdAt"] == comment["createdAt"]


async def test_only_author_can_delete(client: AsyncClient, alice_headers, bob_headers, project):
    comment = await _post(client, alice_headers, project.id, "Temporary")

    assert (await client.delete(f"/api/comments/{comment['id']}", headers=bob_headers)).status_code == 403
    assert (await client.delete(f"/api/comments/{comment['id']}", headers=alice_headers)).status_code == 204
    assert (await client.get(f"/api/comments/{comment['id']}", headers=alice_headers)).status_code == 404


async def test_find_by_content_and_project(client: AsyncClient, alice_headers, project, make_project, alice):
    other = await make_project(alice, title="Other")
    await _post(client, alice_headers, project.id, "great work")
    await _post(client, alice_headers, other.id, "Great idea")

    found = await client.get("/api/comments/findByContent/great", headers=alice_headers)
    assert [c["content"] for c in found.json()] == ["great work"]

    listed = await client.get(f"/api/comments/project/{other.id}", headers=alice_headers)
    assert [c["content"] for c in listed.json()] == ["Great idea"]


class TestSearch:
    """Comment search, exercising filters, sorting and paging."""

    @pytest.fixture
    async def comments(self, make_comment, alice, bob, project):
        start = datetime(2026, 3, 1, 9, 0, 0)
        contents = ["a great start", "not so great", "Great news", "meh", "great again"]
        authors = [alice, bob, alice, bob, alice]
        return [
            await make_comment(author, project, content, created_at=start + timedelta(hours=i))
            for i, (author, content) in enumerate(zip(authors, contents))
        ]

    async def test_filter_sort_desc(self, client: AsyncClient, alice_headers, comments):
        response = await client.get(
            "/api/comments/search",
            params={"content": "great", "sortBy": "CreatedAt", "sortDirection": "desc", "pageSize": 10},
            headers=alice_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert [c["content"] for c in body["items"]] == ["great again", "not so great", "a great start"]
        assert body["totalCount"] == 3
        assert body["hasNext"] is False
        assert body["hasPrevious"] is False

    async def test_filter_by_author_and_dates(self, client: AsyncClient, alice_headers, bob, comments):
        response = await client.get(
            "/api/comments/search",
            params={
                "userId": bob.id,
                "fromDate": "2026-03-01T10:00:00",
                "toDate": "2026-03-01T11:00:00",
            },
            headers=alice_headers,
        )

        assert [c["content"] for c in response.json()["items"]] == ["not so great"]

    async def test_page_size_is_capped(self, client: AsyncClient, alice_headers, comments):
        response = await client.get("/api/comments/search", params={"pageSize": 100}, headers=alice_headers)

        assert response.status_code == 200
        assert response.json()["pageSize"] == 50

    async def test_paging(self, client: AsyncClient, alice_headers, comments):
        response = await client.get(
            "/api/comments/search", params={"pageNumber": 2, "pageSize": 2}, headers=alice_headers
        )

        body = response.json()
        assert [c["content"] for c in body["items"]] == ["Great news", "meh"]
        assert (body["totalPages"], body["hasPrevious"], body["hasNext"]) == (3, True, True)

        past_end = await client.get(
            "/api/comments/search", params={"pageNumber": 9, "pageSize": 2}, headers=alice_headers
        )
        assert past_end.json()["items"] == []
        assert past_end.json()["totalCount"] == 5

    @pytest.mark.parametrize(
        "params,field",
        [
            ({"sortBy": "secret"}, "sortBy"),
            ({"pageNumber": 0}, "pageNumber"),
            ({"sortDirection": "sideways"}, "sortDirection"),
            ({"content": "x" * 101}, "content"),
            ({"fromDate": "yesterday"}, "fromDate"),
        ],
    )
    async def test_invalid_parameters(self, client: AsyncClient, alice_headers, comments, params, field):
        response = await client.get("/api/comments/search", params=params, headers=alice_headers)

        assert response.status_code == 400
        assert [error["field"] for error in response.json()["errors"]] == [field]


async def test_created_at_round_trips(client: AsyncClient, alice_headers, project):
    created = await _post(client, alice_headers, project.id, "Timestamped")

    fetched = await client.get(f"/api/comments/{created['id']}", headers=alice_headers)

    assert fetched.status_code == 200
    assert fetched.json()["createdAt"] == created["createdAt"]
    created_at = datetime.fromisoformat(created["createdAt"])
    assert created_at.tzinfo is None
    assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - created_at) < timedelta(minutes=1)
