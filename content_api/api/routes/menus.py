from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from content_api.core.deps import get_menu_service, require_admin, require_menu_viewer
from content_api.core.logging import site_id_var
from content_api.db.session import get_async_session
from content_api.domain.menus import Menu, MenuItem
from content_api.repositories.menus import MenuRepository
from content_api.schemas.menus import MenuCreate, MenuItemUpdate, MenuItemWrite, MenuRename, MenuReorder
from content_api.services.menus import MenuService

router = APIRouter(prefix="/sites/{site_id}/menus", tags=["Menus"])


async def _site_scope(site_id: UUID = Path(...)) -> UUID:
    site_id_var.set(str(site_id))
    return site_id


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[Menu],
    summary="List menus",
    description="List the menus of a site. Deleted menus and deleted menu items are excluded.",
    dependencies=[Depends(require_menu_viewer)],
)
async def list_menus(
    site_id: UUID = Depends(_site_scope),
    session: AsyncSession = Depends(get_async_session),
) -> List[Menu]:
    return await MenuRepository(session).get_all(site_id)


# PUBLIC_INTERFACE
@router.get(
    "/by-name/{name}",
    response_model=Menu,
    summary="Get menu by name",
    dependencies=[Depends(require_menu_viewer)],
)
async def get_menu_by_name(
    name: str,
    site_id: UUID = Depends(_site_scope),
    session: AsyncSession = Depends(get_async_session),
) -> Menu:
    menu = await MenuRepository(session).get_by_name(site_id, name)
    if menu is None:
        raise HTTPException(status_code=404, detail="Menu not found")
    return menu


# PUBLIC_INTERFACE
@router.get(
    "/{menu_id}",
    response_model=Menu,
    summary="Get menu",
    dependencies=[Depends(require_menu_viewer)],
)
async def get_menu(
    menu_id: UUID,
    site_id: UUID = Depends(_site_scope),
    session: AsyncSession = Depends(get_async_session),
) -> Menu:
    menu = await MenuRepository(session).get_by_id(menu_id, site_id=site_id)
    if menu is None or menu.is_deleted:
        raise HTTPException(status_code=404, detail="Menu not found")
    return menu


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=Menu,
    status_code=status.HTTP_201_CREATED,
    summary="Create menu",
    dependencies=[Depends(require_admin)],
)
async def create_menu(
    payload: MenuCreate,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> Menu:
    return await service.create_menu(site_id, payload)


# PUBLIC_INTERFACE
@router.put(
    "/{menu_id}",
    response_model=Menu,
    summary="Rename menu",
    dependencies=[Depends(require_admin)],
)
async def rename_menu(
    menu_id: UUID,
    payload: MenuRename,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> Menu:
    return await service.rename_menu(site_id, menu_id, payload.name)


# PUBLIC_INTERFACE
@router.delete(
    "/{menu_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete menu",
    dependencies=[Depends(require_admin)],
)
async def delete_menu(
    menu_id: UUID,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> None:
    await service.delete_menu(site_id, menu_id)


# PUBLIC_INTERFACE
@router.post(
    "/{menu_id}/items",
    response_model=MenuItem,
    status_code=status.HTTP_201_CREATED,
    summary="Add menu item",
    dependencies=[Depends(require_admin)],
)
async def add_menu_item(
    menu_id: UUID,
    payload: MenuItemWrite,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> MenuItem:
    return await service.add_menu_item(site_id, menu_id, payload)


# PUBLIC_INTERFACE
@router.put(
    "/{menu_id}/items/{menu_item_id}",
    response_model=MenuItem,
    summary="Update menu item",
    dependencies=[Depends(require_admin)],
)
async def update_menu_item(
    menu_id: UUID,
    menu_item_id: UUID,
    payload: MenuItemUpdate,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> MenuItem:
    return await service.update_menu_item(site_id, menu_id, menu_item_id, payload)


# PUBLIC_INTERFACE
@router.delete(
    "/{menu_id}/items/{menu_item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove menu item",
    dependencies=[Depends(require_admin)],
)
async def remove_menu_item(
    menu_id: UUID,
    menu_item_id: UUID,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> None:
    await service.remove_menu_item(site_id, menu_id, menu_item_id)


# PUBLIC_INTERFACE
@router.post(
    "/{menu_id}/items/reorder",
    response_model=Menu,
    summary="Reorder menu items",
    dependencies=[Depends(require_admin)],
)
async def reorder_menu_items(
    menu_id: UUID,
    payload: MenuReorder,
    site_id: UUID = Depends(_site_scope),
    service: MenuService = Depends(get_menu_service),
) -> Menu:
    return await service.reorder_menu_items(site_id, menu_id, payload.menu_item_ids)
