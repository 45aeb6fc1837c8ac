"""
Bootstrap administrator.

Every user endpoint requires a bearer token, so an empty database needs one
account to log in with. When ``BOOTSTRAP__ADMIN_USERNAME`` and
``BOOTSTRAP__ADMIN_PASSWORD`` are set and no user exists yet, that account is
created as an administrator on startup.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from project_management_api.core import security
from project_management_api.core.database.entities import User
from project_management_api.core.database.repositories import UserRepository
from project_management_api.core.validation import ensure_valid, validate_user
from project_management_api.server.core.config import BootstrapConfig, settings

logger = logging.getLogger(__name__)


async def ensure_bootstrap_admin(
    session_maker: async_sessionmaker[AsyncSession],
    config: Optional[BootstrapConfig] = None,
) -> Optional[User]:
    """Create the configured administrator if the users table is empty.

    Returns:
        The created user, or None if nothing was created
    """
    config = config or settings.bootstrap
    if not config.admin_username or not config.admin_password:
        return None

    ensure_valid(
        validate_user(config.admin_username, config.admin_password, config.admin_first_name, config.admin_last_name)
    )

    async with session_maker() as session:
        user_count = (await session.execute(select(func.count()).select_from(User))).scalar_one()
        if user_count:
            logger.debug("Users already exist; skipping bootstrap administrator")
            return None

        user = await UserRepository(session).create(
            User(
                username=config.admin_username,
                first_name=config.admin_first_name,
                last_name=config.admin_last_name,
                is_admin=True,
                password_hash=security.hash_password(config.admin_password),
            )
        )
        logger.info(f"Created bootstrap administrator {user.username!r} (id={user.id})")
        return user
