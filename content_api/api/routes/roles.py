from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from content_api.core.deps import get_settings_dep, require_admin
from content_api.core.settings import AppSettings
from content_api.db.session import get_async_session
from content_api.identity.pseudo_roles import PseudoRoleNames
from content_api.repositories.security import SecurityRepository
from content_api.schemas.users import RoleCreate, RoleRead

router = APIRouter(prefix="/admin/roles", tags=["Roles"], dependencies=[Depends(require_admin)])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[RoleRead],
    summary="List roles",
)
async def list_roles(
    session: AsyncSession = Depends(get_async_session),
    limit: int = 100,
    offset: int = 0,
) -> List[RoleRead]:
    repo = SecurityRepository(session)
    roles = await repo.list_roles(limit=limit, offset=offset)
    return [RoleRead.model_validate(r) for r in roles]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=RoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
    description="Create an assignable role. Pseudo-role names are reserved.",
)
async def create_role(
    payload: RoleCreate,
    session: AsyncSession = Depends(get_async_session),
    settings: AppSettings = Depends(get_settings_dep),
) -> RoleRead:
    if PseudoRoleNames.from_settings(settings).classify(payload.name) is not None:
        raise HTTPException(status_code=400, detail="Role name is reserved")
    repo = SecurityRepository(session)
    existing = await repo.get_role_by_name(payload.name)
    if existing:
        raise HTTPException(status_code=400, detail="Role already exists")
    role = await repo.create_role(payload.name, payload.description)
    return RoleRead.model_validate(role)


# PUBLIC_INTERFACE
@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete role",
)
async def delete_role(
    role_id: UUID = Path(...),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    repo = SecurityRepository(session)
    await repo.delete_role(role_id)
