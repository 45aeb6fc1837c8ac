"""
Shared test fixtures.

Environment variables are set before the application package is imported so
that the module-level settings, engine and logging configuration pick them up.
Every test gets its own in-memory SQLite database.
"""

import os
from typing import AsyncGenerator, Awaitable, Callable

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-signing-secret-that-is-long-enough-for-hs256"

os.environ["DATABASE__URL"] = TEST_DATABASE_URL
os.environ["DATABASE__AUTO_CREATE"] = "false"
os.environ["JWT__SECRET_KEY"] = TEST_JWT_SECRET
os.environ["SECURITY__BCRYPT_ROUNDS"] = "4"
os.environ["LOGGING__ENABLE_FILE"] = "false"
os.environ["LOGFIRE_ENABLED"] = "false"
os.environ.pop("BOOTSTRAP__ADMIN_USERNAME", None)
os.environ.pop("BOOTSTRAP__ADMIN_PASSWORD", None)

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from project_management_api.core import security  # noqa: E402
from project_management_api.core.database import create_all, create_engine, create_sessionmaker  # noqa: E402
from project_management_api.core.database.entities import Category, Comment, Project, User  # noqa: E402

DEFAULT_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """A fresh in-memory database with every table created."""
    test_engine = create_engine(TEST_DATABASE_URL)
    await create_all(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as db_session:
        yield db_session


@pytest_asyncio.fixture
async def make_user(session_maker) -> Callable[..., Awaitable[User]]:
    """Factory that persists a user with a known password (``DEFAULT_PASSWORD`` unless given)."""

    async def _make_user(
        username: str,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
        is_admin: bool = False,
    ) -> User:
        async with session_maker() as db_session:
            user = User(
                username=username,
                first_name=first_name,
                last_name=last_name,
                is_admin=is_admin,
                password_hash=security.hash_password(password),
            )
            db_session.add(user)
            await db_session.commit()
            await db_session.refresh(user)
            return user

    return _make_user


@pytest_asyncio.fixture
async def make_project(session_maker) -> Callable[..., Awaitable[Project]]:
    async def _make_project(owner: User, title: str = "Website relaunch", description: str = "Redo it") -> Project:
        async with session_maker() as db_session:
            project = Project(title=title, description=description, owner_id=owner.id)
            db_session.add(project)
            await db_session.commit()
            await db_session.refresh(project)
            return project

    return _make_project


@pytest_asyncio.fixture
async def make_category(session_maker) -> Callable[..., Awaitable[Category]]:
    async def _make_category(name: str, description: str | None = None) -> Category:
        async with session_maker() as db_session:
            category = Category(name=name, description=description)
            db_session.add(category)
            await db_session.commit()
            await db_session.refresh(category)
            return category

    return _make_category


@pytest_asyncio.fixture
async def make_comment(session_maker) -> Callable[..., Awaitable[Comment]]:
    async def _make_comment(author: User, project: Project, content: str, **fields) -> Comment:
        async with session_maker() as db_session:
            comment = Comment(content=content, project_id=project.id, user_id=author.id, **fields)
            db_session.add(comment)
            await db_session.commit()
            await db_session.refresh(comment)
            return comment

    return _make_comment
