from __future__ import annotations

import enum
from typing import Any, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from content_api.core.errors import ValidationFailedError


class MenuStatus(str, enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"


class MenuItemStatus(str, enum.Enum):
    ACTIVE = "active"
    DELETED = "deleted"


class MenuItemType(str, enum.Enum):
    PAGE = "page"
    LINK = "link"


class MenuItemLocalisation(BaseModel):
    """Text of a menu item in one language."""
    menu_item_id: UUID
    language_id: UUID
    text: Optional[str] = None
    title: Optional[str] = None


class MenuItem(BaseModel):
    """Entry of a menu. Removing an item only flips its status to deleted."""
    id: UUID = Field(default_factory=uuid4)
    menu_id: UUID
    parent_id: Optional[UUID] = None
    menu_item_type: MenuItemType = MenuItemType.LINK
    page_id: Optional[UUID] = None
    link: Optional[str] = None
    text: str
    title: Optional[str] = None
    sort_order: int = 0
    status: MenuItemStatus = MenuItemStatus.ACTIVE
    menu_item_localisations: List[MenuItemLocalisation] = Field(default_factory=list)

    def set_localisations(self, localisations: List[MenuItemLocalisation]) -> None:
        """Replace the localisations, keeping one entry per language (last wins)."""
        by_language: dict[UUID, MenuItemLocalisation] = {}
        for loc in localisations:
            by_language[loc.language_id] = MenuItemLocalisation(
                menu_item_id=self.id,
                language_id=loc.language_id,
                text=loc.text,
                title=loc.title,
            )
        self.menu_item_localisations = list(by_language.values())


UPDATABLE_ITEM_FIELDS = frozenset({"text", "title", "menu_item_type", "page_id", "link", "parent_id"})


class Menu(BaseModel):
    """
    Menu aggregate: a menu with its items and their localisations.

    The aggregate is persisted and read as one unit by MenuRepository. Deleting
    the menu or one of its items is a soft delete: the status changes and the
    rows stay in storage.
    """
    id: UUID = Field(default_factory=uuid4)
    site_id: UUID
    name: str
    status: MenuStatus = MenuStatus.ACTIVE
    menu_items: List[MenuItem] = Field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.status == MenuStatus.DELETED

    def rename(self, name: str) -> None:
        self.name = name

    def get_item(self, menu_item_id: UUID) -> Optional[MenuItem]:
        for item in self.menu_items:
            if item.id == menu_item_id and item.status != MenuItemStatus.DELETED:
                return item
        return None

    def add_item(
        self,
        *,
        text: str,
        menu_item_id: Optional[UUID] = None,
        menu_item_type: MenuItemType = MenuItemType.LINK,
        page_id: Optional[UUID] = None,
        link: Optional[str] = None,
        title: Optional[str] = None,
        parent_id: Optional[UUID] = None,
        localisations: Optional[List[MenuItemLocalisation]] = None,
    ) -> MenuItem:
        """Append a new item after the existing ones."""
        if menu_item_id is not None and any(i.id == menu_item_id for i in self.menu_items):
            raise ValidationFailedError(f"Menu item {menu_item_id} already exists.")
        sort_order = max((i.sort_order for i in self.menu_items), default=0) + 1
        item = MenuItem(
            id=menu_item_id or uuid4(),
            menu_id=self.id,
            parent_id=parent_id,
            menu_item_type=menu_item_type,
            page_id=page_id,
            link=link,
            text=text,
            title=title,
            sort_order=sort_order,
        )
        item.set_localisations(localisations or [])
        self.menu_items.append(item)
        return item

    def update_item(
        self,
        menu_item_id: UUID,
        *,
        localisations: Optional[List[MenuItemLocalisation]] = None,
        **changes: Any,
    ) -> Optional[MenuItem]:
        """
        Apply the given field changes to a live item; fields not passed keep
        their values. Localisations are replaced only when a list is given.
        """
        unknown = set(changes) - UPDATABLE_ITEM_FIELDS
        if unknown:
            raise ValueError(f"Cannot update menu item fields: {sorted(unknown)}")
        item = self.get_item(menu_item_id)
        if item is None:
            return None
        for field, value in changes.items():
            setattr(item, field, value)
        if localisations is not None:
            item.set_localisations(localisations)
        return item

    def remove_item(self, menu_item_id: UUID) -> bool:
        item = self.get_item(menu_item_id)
        if item is None:
            return False
        item.status = MenuItemStatus.DELETED
        return True

    def reorder_items(self, ordered_ids: List[UUID]) -> None:
        """Assign sort orders following ordered_ids; unknown ids are ignored."""
        position = {item_id: index for index, item_id in enumerate(ordered_ids, start=1)}
        for item in self.menu_items:
            if item.id in position:
                item.sort_order = position[item.id]

    def delete(self) -> None:
        self.status = MenuStatus.DELETED
