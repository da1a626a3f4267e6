from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select

from content_api.core.errors import ValidationFailedError
from content_api.db.models.menus import MenuItem as MenuItemDbEntity
from content_api.domain.menus import Menu, MenuItemLocalisation, MenuItemStatus, MenuStatus
from content_api.repositories.menus import MenuRepository


def _no_deleted_items(menu: Menu) -> bool:
    return all(item.status != MenuItemStatus.DELETED for item in menu.menu_items)


@pytest.mark.asyncio
async def test_get_by_id_without_site(session, seeded_menus):
    menu = await MenuRepository(session).get_by_id(seeded_menus.menu_id_1)

    assert menu is not None
    assert menu.name == "Menu 1"
    assert _no_deleted_items(menu)
    assert [i.id for i in menu.menu_items] == [seeded_menus.menu_item_id_1]


@pytest.mark.asyncio
async def test_get_by_id_with_site(session, seeded_menus):
    menu = await MenuRepository(session).get_by_id(seeded_menus.menu_id_1, site_id=seeded_menus.site_id)

    assert menu is not None
    assert _no_deleted_items(menu)
    assert len(menu.menu_items[0].menu_item_localisations) == 2


@pytest.mark.asyncio
async def test_get_by_id_with_other_site_returns_none(session, seeded_menus):
    menu = await MenuRepository(session).get_by_id(seeded_menus.menu_id_1, site_id=uuid.uuid4())

    assert menu is None


@pytest.mark.asyncio
async def test_get_by_id_unknown_returns_none(session, seeded_menus):
    assert await MenuRepository(session).get_by_id(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_get_by_id_ignores_menu_status(session, seeded_menus):
    menu = await MenuRepository(session).get_by_id(seeded_menus.deleted_menu_id)

    assert menu is not None
    assert menu.status == MenuStatus.DELETED


@pytest.mark.asyncio
async def test_get_by_name(session, seeded_menus):
    menu = await MenuRepository(session).get_by_name(seeded_menus.site_id, "Menu 1")

    assert menu is not None
    assert menu.id == seeded_menus.menu_id_1
    assert _no_deleted_items(menu)


@pytest.mark.asyncio
async def test_get_by_name_is_case_sensitive_and_site_scoped(session, seeded_menus):
    repo = MenuRepository(session)

    assert await repo.get_by_name(seeded_menus.site_id, "menu 1") is None
    assert await repo.get_by_name(uuid.uuid4(), "Menu 1") is None


@pytest.mark.asyncio
async def test_get_all_returns_live_menus_of_site(session, seeded_menus):
    menus = await MenuRepository(session).get_all(seeded_menus.site_id)

    assert len(menus) == 2
    assert {m.id for m in menus} == {seeded_menus.menu_id_1, seeded_menus.menu_id_2}
    for menu in menus:
        assert _no_deleted_items(menu)


@pytest.mark.asyncio
async def test_get_all_unknown_site_is_empty(session, seeded_menus):
    assert await MenuRepository(session).get_all(uuid.uuid4()) == []


@pytest.mark.asyncio
async def test_create_persists_menu_graph(session_maker, seeded_menus):
    language_id = uuid.uuid4()
    new_menu = Menu(site_id=seeded_menus.site_id, name="Menu 3")
    new_menu.add_item(
        text="Item",
        localisations=[MenuItemLocalisation(menu_item_id=uuid.uuid4(), language_id=language_id, text="Item fr")],
    )

    async with session_maker() as session:
        await MenuRepository(session).create(new_menu)

    async with session_maker() as session:
        menu = await MenuRepository(session).get_by_id(new_menu.id, site_id=seeded_menus.site_id)

    assert menu is not None
    assert menu.name == "Menu 3"
    assert len(menu.menu_items) == 1
    item = menu.menu_items[0]
    assert item.text == "Item"
    assert item.menu_item_localisations[0].language_id == language_id
    assert item.menu_item_localisations[0].menu_item_id == item.id


@pytest.mark.asyncio
async def test_update_menu(session_maker, seeded_menus):
    menu_to_update = Menu(site_id=seeded_menus.site_id, id=seeded_menus.menu_id_1, name="New Menu 1")
    item = menu_to_update.add_item(menu_item_id=seeded_menus.menu_item_id_1, text="New Menu Item 1")
    item.set_localisations(
        [
            MenuItemLocalisation(
                menu_item_id=item.id,
                language_id=seeded_menus.language_1,
                text="New Menu Item 1 Localisation 1",
            )
        ]
    )

    async with session_maker() as session:
        await MenuRepository(session).update(menu_to_update)

    async with session_maker() as session:
        updated = await MenuRepository(session).get_by_id(seeded_menus.menu_id_1, site_id=seeded_menus.site_id)

    assert updated is not None
    assert updated.name == "New Menu 1"
    updated_item = updated.menu_items[0]
    assert updated_item.text == "New Menu Item 1"
    assert [loc.text for loc in updated_item.menu_item_localisations] == ["New Menu Item 1 Localisation 1"]


@pytest.mark.asyncio
async def test_update_leaves_deleted_items_stored(session_maker, seeded_menus):
    async with session_maker() as session:
        repo = MenuRepository(session)
        menu = await repo.get_by_id(seeded_menus.menu_id_1)
        menu.rename("Renamed")
        await repo.update(menu)

    async with session_maker() as session:
        count = (
            await session.execute(
                select(func.count(MenuItemDbEntity.id)).where(MenuItemDbEntity.menu_id == seeded_menus.menu_id_1)
            )
        ).scalar_one()

    assert count == 2


@pytest.mark.asyncio
async def test_update_unknown_menu_is_a_no_op(session_maker, seeded_menus):
    ghost = Menu(site_id=seeded_menus.site_id, name="Ghost")

    async with session_maker() as session:
        await MenuRepository(session).update(ghost)

    async with session_maker() as session:
        assert await MenuRepository(session).get_by_id(ghost.id) is None


@pytest.mark.asyncio
async def test_update_on_other_site_is_a_no_op(session_maker, seeded_menus):
    wrong_site = Menu(site_id=uuid.uuid4(), id=seeded_menus.menu_id_1, name="Hijacked")

    async with session_maker() as session:
        await MenuRepository(session).update(wrong_site)

    async with session_maker() as session:
        menu = await MenuRepository(session).get_by_id(seeded_menus.menu_id_1)

    assert menu.name == "Menu 1"


@pytest.mark.asyncio
async def test_read_after_soft_delete_in_same_session(session, seeded_menus):
    repo = MenuRepository(session)
    menu = await repo.get_by_id(seeded_menus.menu_id_1)
    assert menu.remove_item(seeded_menus.menu_item_id_1)
    await repo.update(menu)

    reread = await repo.get_by_id(seeded_menus.menu_id_1)

    assert reread.menu_items == []


@pytest.mark.asyncio
async def test_update_rejects_item_reusing_deleted_row_id(session_maker, seeded_menus):
    async with session_maker() as session:
        repo = MenuRepository(session)
        menu = await repo.get_by_id(seeded_menus.menu_id_1)
        menu.rename("Renamed")
        menu.add_item(menu_item_id=seeded_menus.menu_item_id_2, text="Reborn")

        with pytest.raises(ValidationFailedError):
            await repo.update(menu)

    async with session_maker() as session:
        row = await session.get(MenuItemDbEntity, seeded_menus.menu_item_id_2)
        menu = await MenuRepository(session).get_by_id(seeded_menus.menu_id_1)

    assert row.status == MenuItemStatus.DELETED
    assert row.text == "Menu Item 2"
    assert menu.name == "Menu 1"


def test_add_item_rejects_id_already_in_menu():
    menu = Menu(site_id=uuid.uuid4(), name="Menu")
    item = menu.add_item(text="First")

    with pytest.raises(ValidationFailedError):
        menu.add_item(menu_item_id=item.id, text="Second")

    assert [i.text for i in menu.menu_items] == ["First"]
