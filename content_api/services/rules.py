from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from content_api.repositories.menus import MenuRepository
from content_api.repositories.security import SecurityRepository


class UserRules:
    """Uniqueness checks for user names and emails (case-insensitive)."""

    def __init__(self, session: AsyncSession) -> None:
        self.repo = SecurityRepository(session)

    async def is_user_name_unique(self, name: str, user_id: Optional[UUID] = None) -> bool:
        """True when no other user (than user_id, if given) uses this name."""
        return await self.repo.count_users_with_user_name(name, exclude_id=user_id) == 0

    async def is_user_email_unique(self, email: str, user_id: Optional[UUID] = None) -> bool:
        return await self.repo.count_users_with_email(email, exclude_id=user_id) == 0


class MenuRules:
    """Menu names are unique among the live menus of a site."""

    def __init__(self, session: AsyncSession) -> None:
        self.repo = MenuRepository(session)

    async def is_menu_name_unique(self, site_id: UUID, name: str, menu_id: Optional[UUID] = None) -> bool:
        return await self.repo.count_by_name(site_id, name, exclude_id=menu_id) == 0
