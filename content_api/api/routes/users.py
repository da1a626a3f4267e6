from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from content_api.core.deps import get_user_service, require_admin
from content_api.schemas.users import UserCreate, UserRead, UserRolesViewModel, UsersQuery, UsersViewModel
from content_api.services.users import UserService

router = APIRouter(prefix="/admin/users", tags=["Users"], dependencies=[Depends(require_admin)])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=UsersViewModel,
    summary="List users",
    description="Page through users ordered by email. number_of_users=0 returns all remaining users.",
)
async def list_users(
    start_index: int = Query(0, ge=0),
    number_of_users: int = Query(10, ge=0),
    service: UserService = Depends(get_user_service),
) -> UsersViewModel:
    query = UsersQuery(start_index=start_index, number_of_users=number_of_users)
    return await service.get_users_view_model(query)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create a user; the email doubles as user name.",
)
async def create_user(
    payload: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    user = await service.create_user(payload.email)
    return UserRead.model_validate(user)


# PUBLIC_INTERFACE
@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete user",
)
async def delete_user(
    user_id: UUID = Path(...),
    service: UserService = Depends(get_user_service),
) -> None:
    await service.delete_user(user_id)


# PUBLIC_INTERFACE
@router.get(
    "/{user_id}/roles",
    response_model=UserRolesViewModel,
    summary="Get user roles",
    description="Roles held by the user and roles still available for assignment.",
)
async def get_user_roles(
    user_id: UUID = Path(...),
    service: UserService = Depends(get_user_service),
) -> UserRolesViewModel:
    model = await service.get_user_roles_view_model(user_id)
    if model is None:
        raise HTTPException(status_code=404, detail="User not found")
    return model


# PUBLIC_INTERFACE
@router.post(
    "/{user_id}/roles/{role_name}",
    response_model=UserRolesViewModel,
    summary="Assign role to user",
)
async def assign_role(
    user_id: UUID,
    role_name: str,
    service: UserService = Depends(get_user_service),
) -> UserRolesViewModel:
    await service.add_user_to_role(user_id, role_name)
    return await service.get_user_roles_view_model(user_id)  # type: ignore[return-value]


# PUBLIC_INTERFACE
@router.delete(
    "/{user_id}/roles/{role_name}",
    response_model=UserRolesViewModel,
    summary="Remove role from user",
)
async def remove_role(
    user_id: UUID,
    role_name: str,
    service: UserService = Depends(get_user_service),
) -> UserRolesViewModel:
    await service.remove_user_from_role(user_id, role_name)
    return await service.get_user_roles_view_model(user_id)  # type: ignore[return-value]
