"""
Database utility functions for engine and session management.

This module provides the core utility functions for creating database engines,
session factories, and repository bundles.

Functions:
- create_engine: Creates async SQLAlchemy engine with URL normalization
- create_sessionmaker: Creates async session factory with safe defaults
- create_all: Creates all tables from ORM metadata (for tests/dev)
- build_sql_repos: Builds the repository bundle for one session
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from .base import Base
from .repositories import (
    CategoryRepository,
    CommentRepository,
    ProjectRepository,
    RefreshTokenRepository,
    UserRepository,
)


def normalize_url(db_url: str) -> str:
    """Rewrite sync driver URLs to their async counterparts.

    ``postgresql://`` and other Postgres variants become ``postgresql+asyncpg://``;
    ``sqlite://`` becomes ``sqlite+aiosqlite://``.
    """
    url = re.sub(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://", "postgresql+asyncpg://", db_url, count=1)
    return re.sub(r"^sqlite(?:\+pysqlite)?://", "sqlite+aiosqlite://", url, count=1)


def create_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    In-memory SQLite databases are bound to a single shared connection so that
    every session sees the same data.

    Args:
        db_url: Database connection URL
        echo: Echo emitted SQL

    Returns:
        Configured AsyncEngine instance
    """
    url = normalize_url(db_url)
    if url.startswith("sqlite") and ":memory:" in url:
        return create_async_engine(url, echo=echo, poolclass=StaticPool)
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` with safe defaults for this project.

    Args:
        engine: Async SQLAlchemy engine

    Returns:
        Configured async session factory
    """
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create all tables for the current ORM metadata.

    This is mainly intended for tests and local development.
    Production should use Alembic migrations instead.

    Args:
        engine: Async SQLAlchemy engine
    """
    # Entities must be imported so their tables are registered on the metadata.
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories sharing one session."""

    users: UserRepository
    projects: ProjectRepository
    categories: CategoryRepository
    comments: CommentRepository
    refresh_tokens: RefreshTokenRepository


def build_sql_repos(session: AsyncSession) -> SqlRepoBundle:
    """Build a ``SqlRepoBundle`` bound to ``session``.

    Args:
        session: Async session shared by every repository in the bundle

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        users=UserRepository(session),
        projects=ProjectRepository(session),
        categories=CategoryRepository(session),
        comments=CommentRepository(session),
        refresh_tokens=RefreshTokenRepository(session),
    )
