from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from content_api.core.errors import MenuNotFoundError, NotFoundError, ValidationFailedError
from content_api.domain.menus import Menu, MenuItem
from content_api.repositories.menus import MenuRepository
from content_api.schemas.menus import MenuCreate, MenuItemUpdate, MenuItemWrite
from content_api.services.base import BaseService
from content_api.services.rules import MenuRules

logger = logging.getLogger(__name__)


class MenuService(BaseService):
    """
    Commands on the Menu aggregate.

    Each command loads the aggregate, applies the change in the domain model
    and stores it back through MenuRepository.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.menu_repo = MenuRepository(session)
        self.rules = MenuRules(session)

    async def _get_or_raise(self, site_id: UUID, menu_id: UUID) -> Menu:
        menu = await self.menu_repo.get_by_id(menu_id, site_id=site_id)
        if menu is None or menu.is_deleted:
            raise MenuNotFoundError()
        return menu

    async def _ensure_name_available(self, site_id: UUID, name: str, menu_id: Optional[UUID] = None) -> None:
        if not name.strip():
            raise ValidationFailedError("Menu name is required.")
        if not await self.rules.is_menu_name_unique(site_id, name, menu_id):
            raise ValidationFailedError(f"A menu named '{name}' already exists.")

    # PUBLIC_INTERFACE
    async def create_menu(self, site_id: UUID, payload: MenuCreate) -> Menu:
        """Create an empty menu for a site."""
        await self._ensure_name_available(site_id, payload.name)
        menu = Menu(site_id=site_id, name=payload.name)
        if payload.id is not None:
            menu.id = payload.id
        await self.menu_repo.create(menu)
        logger.info("Created menu %s '%s'", menu.id, menu.name)
        return menu

    # PUBLIC_INTERFACE
    async def rename_menu(self, site_id: UUID, menu_id: UUID, name: str) -> Menu:
        menu = await self._get_or_raise(site_id, menu_id)
        await self._ensure_name_available(site_id, name, menu_id)
        menu.rename(name)
        await self.menu_repo.update(menu)
        return menu

    # PUBLIC_INTERFACE
    async def delete_menu(self, site_id: UUID, menu_id: UUID) -> None:
        """Soft delete: the menu disappears from site listings but stays stored."""
        menu = await self._get_or_raise(site_id, menu_id)
        menu.delete()
        await self.menu_repo.update(menu)
        logger.info("Deleted menu %s", menu_id)

    # PUBLIC_INTERFACE
    async def add_menu_item(self, site_id: UUID, menu_id: UUID, payload: MenuItemWrite) -> MenuItem:
        menu = await self._get_or_raise(site_id, menu_id)
        item = menu.add_item(
            text=payload.text,
            menu_item_type=payload.menu_item_type,
            page_id=payload.page_id,
            link=payload.link,
            title=payload.title,
            parent_id=payload.parent_id,
            localisations=payload.to_localisations(),
        )
        await self.menu_repo.update(menu)
        return item

    # PUBLIC_INTERFACE
    async def update_menu_item(
        self, site_id: UUID, menu_id: UUID, menu_item_id: UUID, payload: MenuItemUpdate
    ) -> MenuItem:
        """Change the fields present in the payload; omitted fields keep their stored values."""
        changes = payload.changes()
        for field in ("text", "menu_item_type"):
            if field in changes and changes[field] is None:
                raise ValidationFailedError(f"Menu item {field} cannot be null.")
        menu = await self._get_or_raise(site_id, menu_id)
        item = menu.update_item(menu_item_id, localisations=payload.to_localisations(), **changes)
        if item is None:
            raise NotFoundError("Menu Item Not Found.")
        await self.menu_repo.update(menu)
        return item

    # PUBLIC_INTERFACE
    async def remove_menu_item(self, site_id: UUID, menu_id: UUID, menu_item_id: UUID) -> None:
        """Soft delete a menu item; later reads of the menu no longer include it."""
        menu = await self._get_or_raise(site_id, menu_id)
        if not menu.remove_item(menu_item_id):
            raise NotFoundError("Menu Item Not Found.")
        await self.menu_repo.update(menu)

    # PUBLIC_INTERFACE
    async def reorder_menu_items(self, site_id: UUID, menu_id: UUID, ordered_ids: List[UUID]) -> Menu:
        menu = await self._get_or_raise(site_id, menu_id)
        menu.reorder_items(ordered_ids)
        await self.menu_repo.update(menu)
        return menu
