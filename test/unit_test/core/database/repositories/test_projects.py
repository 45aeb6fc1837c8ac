"""Tests for project repository queries and the category association."""

from project_management_api.core.database.query import PageRequest
from project_management_api.core.database.repositories import ProjectRepository


class TestProjectRepository:
    """Tests for ProjectRepository against SQLite."""

    async def test_find_by_title_is_case_sensitive_substring(self, session, make_user, make_project):
        owner = await make_user("owner")
        await make_project(owner, title="Website relaunch")
        await make_project(owner, title="Mobile app")

        repo = ProjectRepository(session)
        assert [p.title for p in await repo.find_by_title("site")] == ["Website relaunch"]
        assert await repo.find_by_title("SITE") == []

    async def test_get_by_id_loads_details(self, session, make_user, make_project, make_category, make_comment):
        owner = await make_user("owner")
        project = await make_project(owner)
        category = await make_category("Backend")
        await make_comment(owner, project, "first")

        repo = ProjectRepository(session)
        await repo.add_category(project.id, category.id)
        loaded = await repo.get_by_id(project.id)

        assert loaded.owner.username == "owner"
        assert [c.name for c in loaded.categories] == ["Backend"]
        assert [c.content for c in loaded.comments] == ["first"]

    async def test_category_links(self, session, make_user, make_project, make_category):
        owner = await make_user("owner")
        project = await make_project(owner)
        backend = await make_category("Backend")
        frontend = await make_category("Frontend")

        repo = ProjectRepository(session)
        assert await repo.add_category(project.id, backend.id) is True
        assert await repo.add_category(project.id, backend.id) is False
        assert await repo.add_category(project.id, frontend.id) is True
        assert [c.name for c in await repo.list_categories(project.id)] == ["Backend", "Frontend"]

        assert await repo.remove_category(project.id, backend.id) is True
        assert await repo.remove_category(project.id, backend.id) is False
        assert [c.name for c in await repo.list_categories(project.id)] == ["Frontend"]

    async def test_search_by_owner_and_category(self, session, make_user, make_project, make_category):
        alice = await make_user("alice")
        bob = await make_user("bob")
        first = await make_project(alice, title="Alpha")
        await make_project(alice, title="Beta")
        third = await make_project(bob, title="Gamma")
        category = await make_category("Backend")

        repo = ProjectRepository(session)
        await repo.add_category(first.id, category.id)
        await repo.add_category(third.id, category.id)

        page = PageRequest.from_params(sort_by="ownerName", sort_direction="desc")
        result = await repo.search(page, category_id=category.id)
        assert [p.title for p in result.items] == ["Gamma", "Alpha"]

        result = await repo.search(PageRequest.from_params(sort_by="title"), owner_username="ali")
        assert [p.title for p in result.items] == ["Alpha", "Beta"]
        assert result.total_count == 2
