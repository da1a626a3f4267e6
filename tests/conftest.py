from __future__ import annotations

import uuid

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from content_api.db import Base, make_session_maker
from content_api.db.models.menus import (
    Menu as MenuDbEntity,
    MenuItem as MenuItemDbEntity,
    MenuItemLocalisation as MenuItemLocalisationDbEntity,
)
from content_api.domain.menus import MenuItemStatus, MenuStatus


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'content.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return make_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


class SeededMenus:
    """Ids of the menu graph written by the seeded_menus fixture."""

    def __init__(self) -> None:
        self.site_id = uuid.uuid4()
        self.menu_id_1 = uuid.uuid4()
        self.menu_id_2 = uuid.uuid4()
        self.deleted_menu_id = uuid.uuid4()
        self.menu_item_id_1 = uuid.uuid4()
        self.menu_item_id_2 = uuid.uuid4()
        self.language_1 = uuid.uuid4()
        self.language_2 = uuid.uuid4()


@pytest_asyncio.fixture
async def seeded_menus(session_maker) -> SeededMenus:
    """
    Site with two live menus. Menu 1 has one active item with two
    localisations and one deleted item. A deleted menu lives on another site.
    """
    ids = SeededMenus()
    async with session_maker() as session:
        session.add_all(
            [
                MenuDbEntity(
                    id=ids.menu_id_1,
                    site_id=ids.site_id,
                    name="Menu 1",
                    status=MenuStatus.ACTIVE,
                    menu_items=[
                        MenuItemDbEntity(
                            id=ids.menu_item_id_1,
                            menu_id=ids.menu_id_1,
                            text="Menu Item 1",
                            sort_order=1,
                            status=MenuItemStatus.ACTIVE,
                            menu_item_localisations=[
                                MenuItemLocalisationDbEntity(
                                    menu_item_id=ids.menu_item_id_1,
                                    language_id=ids.language_1,
                                    text="Menu Item 1 Localisation 1",
                                ),
                                MenuItemLocalisationDbEntity(
                                    menu_item_id=ids.menu_item_id_1,
                                    language_id=ids.language_2,
                                    text="Menu Item 1 Localisation 2",
                                ),
                            ],
                        ),
                        MenuItemDbEntity(
                            id=ids.menu_item_id_2,
                            menu_id=ids.menu_id_1,
                            text="Menu Item 2",
                            sort_order=2,
                            status=MenuItemStatus.DELETED,
                        ),
                    ],
                ),
                MenuDbEntity(id=ids.menu_id_2, site_id=ids.site_id, name="Menu 2", status=MenuStatus.ACTIVE),
                MenuDbEntity(
                    id=ids.deleted_menu_id,
                    site_id=uuid.uuid4(),
                    name="Old Menu",
                    status=MenuStatus.DELETED,
                ),
            ]
        )
        await session.commit()
    return ids
