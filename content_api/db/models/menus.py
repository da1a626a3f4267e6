from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Enum, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from content_api.db.base import Base, SiteMixin, TimestampMixin, UUIDPkMixin
from content_api.domain.menus import MenuItemStatus, MenuItemType, MenuStatus


class Menu(UUIDPkMixin, SiteMixin, TimestampMixin, Base):
    """Navigation menu owned by a site."""
    __tablename__ = "menus"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[MenuStatus] = mapped_column(
        Enum(MenuStatus, native_enum=False, length=16),
        nullable=False,
        default=MenuStatus.ACTIVE,
        server_default=MenuStatus.ACTIVE.name,
    )

    # No default loader: read paths choose their own item filtering.
    menu_items: Mapped[list["MenuItem"]] = relationship(
        "MenuItem",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="MenuItem.sort_order",
        lazy="raise",
    )


class MenuItem(UUIDPkMixin, TimestampMixin, Base):
    """Entry of a menu, pointing either at a page or at an arbitrary link."""
    __tablename__ = "menu_items"

    menu_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    menu_item_type: Mapped[MenuItemType] = mapped_column(
        Enum(MenuItemType, native_enum=False, length=16),
        nullable=False,
        default=MenuItemType.LINK,
        server_default=MenuItemType.LINK.name,
    )
    page_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    status: Mapped[MenuItemStatus] = mapped_column(
        Enum(MenuItemStatus, native_enum=False, length=16),
        nullable=False,
        default=MenuItemStatus.ACTIVE,
        server_default=MenuItemStatus.ACTIVE.name,
    )

    menu: Mapped["Menu"] = relationship("Menu", back_populates="menu_items")
    menu_item_localisations: Mapped[list["MenuItemLocalisation"]] = relationship(
        "MenuItemLocalisation",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class MenuItemLocalisation(Base):
    """Per-language text of a menu item."""
    __tablename__ = "menu_item_localisations"
    __table_args__ = (
        UniqueConstraint("menu_item_id", "language_id", name="uq_menu_item_localisations_item_language"),
    )

    menu_item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("menu_items.id", ondelete="CASCADE"), primary_key=True
    )
    language_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    menu_item: Mapped["MenuItem"] = relationship("MenuItem", back_populates="menu_item_localisations")
