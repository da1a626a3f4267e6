"""
Database seeding utilities for minimal reference data.

Seeds:
- Administrator role (name taken from ADMIN_ROLE_NAME)
- An empty default menu for the default site

Usage:
  python -m content_api.db.run_migrations upgrade head
  python -m content_api.db.seed
"""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from content_api.core.settings import get_app_settings
from content_api.db.session import get_async_session
from content_api.domain.menus import Menu
from content_api.repositories.menus import MenuRepository
from content_api.repositories.security import SecurityRepository

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
async def seed_all() -> None:
    """
    Seed the database with minimal reference data.

    Safe to run repeatedly: existing rows are left untouched.
    """
    settings = get_app_settings()
    async for session in get_async_session():
        await _seed_security(session, settings.ADMIN_ROLE_NAME)
        await _seed_default_menu(session, settings.DEFAULT_SITE_ID, settings.DEFAULT_MENU_NAME)


async def _seed_security(session: AsyncSession, admin_role_name: str) -> None:
    repo = SecurityRepository(session)
    if await repo.get_role_by_name(admin_role_name) is None:
        await repo.create_role(admin_role_name, "Full administrative access")
        logger.info("Seeded role '%s'", admin_role_name)


async def _seed_default_menu(session: AsyncSession, site_id: UUID, name: str) -> None:
    repo = MenuRepository(session)
    if await repo.get_by_name(site_id, name) is None:
        await repo.create(Menu(site_id=site_id, name=name))
        logger.info("Seeded menu '%s' for site %s", name, site_id)


if __name__ == "__main__":
    asyncio.run(seed_all())
