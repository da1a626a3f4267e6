from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from content_api.db.models.menus import Menu as MenuDbEntity, MenuItem as MenuItemDbEntity
from content_api.domain.menus import Menu, MenuItemStatus, MenuStatus
from content_api.mappers.menus import menu_to_domain, menu_to_entity, merge_menu_into_entity
from .base import BaseRepository

logger = logging.getLogger(__name__)


def _active_menu_items():
    """
    Loader option used by every read path: menu items flagged as deleted stay
    in storage but are never loaded into a returned menu.
    """
    return selectinload(
        MenuDbEntity.menu_items.and_(MenuItemDbEntity.status != MenuItemStatus.DELETED)
    ).selectinload(MenuItemDbEntity.menu_item_localisations)


def _all_menu_items():
    return selectinload(MenuDbEntity.menu_items).selectinload(MenuItemDbEntity.menu_item_localisations)


class MenuRepository(BaseRepository):
    """Repository for the Menu aggregate (menu, items, localisations)."""

    def _select_menus(self) -> Select:
        # populate_existing: a menu already in the identity map (e.g. from a
        # write) must be reloaded with the filtered item collection.
        return (
            select(MenuDbEntity)
            .options(_active_menu_items())
            .execution_options(populate_existing=True)
        )

    async def _one(self, stmt: Select) -> Optional[Menu]:
        entity = await self.scalar_one_or_none(stmt)
        return menu_to_domain(entity) if entity is not None else None

    # PUBLIC_INTERFACE
    async def get_by_id(self, menu_id: UUID, *, site_id: Optional[UUID] = None) -> Optional[Menu]:
        """
        Return the menu with the given id, or None.

        Without site_id the lookup ignores site scoping; with it the menu must
        belong to that site. The menu's own status is not considered here.
        """
        stmt = self._select_menus().where(MenuDbEntity.id == menu_id)
        if site_id is not None:
            stmt = stmt.where(MenuDbEntity.site_id == site_id)
        return await self._one(stmt)

    # PUBLIC_INTERFACE
    async def get_by_name(self, site_id: UUID, name: str) -> Optional[Menu]:
        """Return the non-deleted menu of a site with exactly this name, or None."""
        stmt = self._select_menus().where(
            MenuDbEntity.site_id == site_id,
            MenuDbEntity.name == name,
            MenuDbEntity.status != MenuStatus.DELETED,
        )
        # Names are only unique among live menus; take the oldest if data disagrees.
        stmt = stmt.order_by(MenuDbEntity.created_at).limit(1)
        return await self._one(stmt)

    # PUBLIC_INTERFACE
    async def get_all(self, site_id: UUID) -> List[Menu]:
        """Return all non-deleted menus of a site."""
        stmt = self._select_menus().where(
            MenuDbEntity.site_id == site_id,
            MenuDbEntity.status != MenuStatus.DELETED,
        ).order_by(MenuDbEntity.name)
        res = await self.scalars(stmt)
        return [menu_to_domain(m) for m in res]

    async def count_by_name(self, site_id: UUID, name: str, exclude_id: Optional[UUID] = None) -> int:
        """Count live menus of a site carrying this name, optionally ignoring one menu."""
        stmt = select(func.count(MenuDbEntity.id)).where(
            MenuDbEntity.site_id == site_id,
            MenuDbEntity.name == name,
            MenuDbEntity.status != MenuStatus.DELETED,
        )
        if exclude_id is not None:
            stmt = stmt.where(MenuDbEntity.id != exclude_id)
        return int(await self.scalar_one(stmt))

    # PUBLIC_INTERFACE
    async def create(self, menu: Menu) -> None:
        """Persist a new menu graph (menu, items, localisations) in one commit."""
        await self.add(menu_to_entity(menu))
        await self.commit()
        logger.debug("Created menu %s with %d item(s)", menu.id, len(menu.menu_items))

    # PUBLIC_INTERFACE
    async def update(self, menu: Menu) -> None:
        """
        Merge the aggregate into the stored graph with the same site and id.

        Does nothing when no such menu is stored.
        """
        stmt = (
            select(MenuDbEntity)
            .where(MenuDbEntity.id == menu.id, MenuDbEntity.site_id == menu.site_id)
            .options(_all_menu_items())
            .execution_options(populate_existing=True)
        )
        entity = await self.scalar_one_or_none(stmt)
        if entity is None:
            logger.warning("Menu %s not found for site %s; update skipped", menu.id, menu.site_id)
            return
        merge_menu_into_entity(menu, entity)
        await self.commit()
