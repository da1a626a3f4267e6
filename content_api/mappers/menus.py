from __future__ import annotations

from content_api.core.errors import ValidationFailedError
from content_api.db.models.menus import (
    Menu as MenuDbEntity,
    MenuItem as MenuItemDbEntity,
    MenuItemLocalisation as MenuItemLocalisationDbEntity,
)
from content_api.domain.menus import Menu, MenuItem, MenuItemLocalisation, MenuItemStatus


# PUBLIC_INTERFACE
def menu_to_domain(entity: MenuDbEntity) -> Menu:
    """
    Build a Menu aggregate from a loaded entity graph.

    The caller decides which menu items were loaded; the mapper copies whatever
    is present on entity.menu_items.
    """
    return Menu(
        id=entity.id,
        site_id=entity.site_id,
        name=entity.name,
        status=entity.status,
        menu_items=[_menu_item_to_domain(i) for i in entity.menu_items],
    )


def _menu_item_to_domain(entity: MenuItemDbEntity) -> MenuItem:
    return MenuItem(
        id=entity.id,
        menu_id=entity.menu_id,
        parent_id=entity.parent_id,
        menu_item_type=entity.menu_item_type,
        page_id=entity.page_id,
        link=entity.link,
        text=entity.text,
        title=entity.title,
        sort_order=entity.sort_order,
        status=entity.status,
        menu_item_localisations=[
            MenuItemLocalisation(
                menu_item_id=loc.menu_item_id,
                language_id=loc.language_id,
                text=loc.text,
                title=loc.title,
            )
            for loc in entity.menu_item_localisations
        ],
    )


# PUBLIC_INTERFACE
def menu_to_entity(menu: Menu) -> MenuDbEntity:
    """Build a new (transient) entity graph from a Menu aggregate."""
    return MenuDbEntity(
        id=menu.id,
        site_id=menu.site_id,
        name=menu.name,
        status=menu.status,
        menu_items=[_menu_item_to_entity(menu.id, i) for i in menu.menu_items],
    )


def _menu_item_to_entity(menu_id, item: MenuItem) -> MenuItemDbEntity:
    entity = MenuItemDbEntity(id=item.id, menu_id=menu_id)
    _copy_menu_item(item, entity)
    entity.menu_item_localisations = [_localisation_to_entity(item.id, loc) for loc in item.menu_item_localisations]
    return entity


def _localisation_to_entity(menu_item_id, loc: MenuItemLocalisation) -> MenuItemLocalisationDbEntity:
    return MenuItemLocalisationDbEntity(
        menu_item_id=menu_item_id,
        language_id=loc.language_id,
        text=loc.text,
        title=loc.title,
    )


def _copy_menu_item(item: MenuItem, entity: MenuItemDbEntity) -> None:
    entity.parent_id = item.parent_id
    entity.menu_item_type = item.menu_item_type
    entity.page_id = item.page_id
    entity.link = item.link
    entity.text = item.text
    entity.title = item.title
    entity.sort_order = item.sort_order
    entity.status = item.status


# PUBLIC_INTERFACE
def merge_menu_into_entity(menu: Menu, entity: MenuDbEntity) -> None:
    """
    Copy the mutable state of a Menu aggregate onto a persistent entity graph.

    Items are matched by id and localisations by language. Items missing from
    the aggregate are left as they are (they are soft deleted rows the read
    path never handed out); localisations missing from an item are removed.
    An aggregate item whose id belongs to a soft deleted row is rejected
    before anything is changed.
    """
    existing_items = {i.id: i for i in entity.menu_items}
    for item in menu.menu_items:
        stored = existing_items.get(item.id)
        if stored is not None and stored.status == MenuItemStatus.DELETED:
            raise ValidationFailedError(f"Menu item {item.id} has been deleted.")

    entity.name = menu.name
    entity.status = menu.status
    for item in menu.menu_items:
        item_entity = existing_items.get(item.id)
        if item_entity is None:
            entity.menu_items.append(_menu_item_to_entity(entity.id, item))
            continue
        _copy_menu_item(item, item_entity)
        _merge_localisations(item, item_entity)


def _merge_localisations(item: MenuItem, entity: MenuItemDbEntity) -> None:
    existing = {loc.language_id: loc for loc in entity.menu_item_localisations}
    wanted = {loc.language_id for loc in item.menu_item_localisations}

    for loc_entity in list(entity.menu_item_localisations):
        if loc_entity.language_id not in wanted:
            entity.menu_item_localisations.remove(loc_entity)

    for loc in item.menu_item_localisations:
        loc_entity = existing.get(loc.language_id)
        if loc_entity is None:
            entity.menu_item_localisations.append(_localisation_to_entity(entity.id, loc))
        else:
            loc_entity.text = loc.text
            loc_entity.title = loc.title
