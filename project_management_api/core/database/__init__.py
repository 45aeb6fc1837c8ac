"""
Database layer for the project management API.

Structure:
- entities/: Table models (users, projects, categories, comments, refresh tokens)
- repositories/: Data access layer, one repository per aggregate
- query.py: Filtering, sorting and paging of search statements
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session, repo bundle)
"""

from .base import Base
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    SqlRepoBundle,
    build_sql_repos,
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "SqlRepoBundle",
    "async_session_maker",
    "build_sql_repos",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
]
