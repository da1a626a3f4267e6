from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from content_api.core.security import decode_token
from content_api.core.settings import AppSettings, get_app_settings
from content_api.db.session import get_async_session
from content_api.identity.manager import SqlIdentityManager, SqlRoleManager
from content_api.identity.principal import Principal
from content_api.identity.pseudo_roles import PseudoRoleNames
from content_api.services.menus import MenuService
from content_api.services.users import UserService

logger = logging.getLogger(__name__)

# Optional bearer: requests without a token run as the anonymous principal.
bearer_scheme = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def get_settings_dep() -> AppSettings:
    """Application settings as a dependency (overridable in tests)."""
    return get_app_settings()


# PUBLIC_INTERFACE
async def get_user_service(
    session: AsyncSession = Depends(get_async_session),
    settings: AppSettings = Depends(get_settings_dep),
) -> UserService:
    """Build a request-scoped UserService over the SQL identity store."""
    return UserService(
        SqlIdentityManager(session),
        SqlRoleManager(session),
        PseudoRoleNames.from_settings(settings),
    )


# PUBLIC_INTERFACE
async def get_menu_service(session: AsyncSession = Depends(get_async_session)) -> MenuService:
    return MenuService(session)


# PUBLIC_INTERFACE
async def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_async_session),
) -> Principal:
    """
    Resolve the request principal from an optional bearer token.

    No token gives the anonymous principal. A token that fails verification,
    or whose subject is unknown or inactive, is rejected with 401. Roles come
    from the store, not from the token.
    """
    if credentials is None:
        return Principal.anonymous()

    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    manager = SqlIdentityManager(session)
    try:
        user = await manager.find_by_id(_parse_uuid(subject))
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    roles = await manager.get_roles(user)
    return Principal.for_user(str(user.id), roles)


def _parse_uuid(value: str) -> UUID:
    return UUID(str(value))


def _ensure_in_any_role(principal: Principal, required) -> Principal:
    if not principal.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not any(principal.is_in_role(r) for r in required):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
    return principal


# PUBLIC_INTERFACE
def require_roles(*required: str):
    """
    Create a dependency that requires the current principal to hold one of the
    specified (real) roles.
    """

    async def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        return _ensure_in_any_role(principal, required)

    return _dep


# PUBLIC_INTERFACE
async def require_admin(
    principal: Principal = Depends(get_principal),
    settings: AppSettings = Depends(get_settings_dep),
) -> Principal:
    """Require the administrator role named by the settings in effect for this request."""
    return _ensure_in_any_role(principal, [settings.ADMIN_ROLE_NAME])


# PUBLIC_INTERFACE
async def require_menu_viewer(
    principal: Principal = Depends(get_principal),
    service: UserService = Depends(get_user_service),
    settings: AppSettings = Depends(get_settings_dep),
) -> Principal:
    """
    Gate for reading menus: the principal must satisfy the configured
    MENU_VIEW_ROLES under UserService.is_user_authorized (pseudo-roles apply).
    """
    if not service.is_user_authorized(principal, settings.MENU_VIEW_ROLES):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view menus")
    return principal
