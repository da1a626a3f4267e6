from __future__ import annotations

import logging
from typing import List, Optional, Protocol, runtime_checkable
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from content_api.db.models.security import Role, User
from content_api.repositories.security import SecurityRepository
from content_api.services.rules import UserRules

logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)


class IdentityError(BaseModel):
    """Error reported by the identity store."""
    code: str = Field(..., description="Machine-readable error code, e.g. DuplicateEmail")
    description: str = Field(..., description="Human-readable description")


class IdentityResult(BaseModel):
    """Outcome of an identity operation: success flag plus reported errors."""
    succeeded: bool
    errors: List[IdentityError] = Field(default_factory=list)

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))


def _error(code: str, description: str) -> IdentityError:
    return IdentityError(code=code, description=description)


@runtime_checkable
class IdentityManager(Protocol):
    """User store operations the user service depends on."""

    @property
    def supports_queryable_users(self) -> bool: ...

    async def find_by_id(self, user_id: UUID) -> Optional[User]: ...

    async def create(self, user: User) -> IdentityResult: ...

    async def add_to_role(self, user: User, role_name: str) -> IdentityResult: ...

    async def remove_from_role(self, user: User, role_name: str) -> IdentityResult: ...

    async def delete(self, user: User) -> IdentityResult: ...

    async def get_roles(self, user: User) -> List[str]: ...

    async def count_users(self) -> int: ...

    async def list_users(self, skip: int = 0, take: Optional[int] = None) -> List[User]:
        """Users ordered by email; take None means all remaining."""
        ...


@runtime_checkable
class RoleManager(Protocol):
    """Role store operations the user service depends on."""

    async def list_roles(self) -> List[Role]: ...

    async def find_by_name(self, name: str) -> Optional[Role]: ...


class SqlIdentityManager:
    """
    IdentityManager backed by the users/roles tables.

    Store-level rejections (duplicate names, unknown roles, ...) are reported
    through IdentityResult instead of being raised.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.repo = SecurityRepository(session)
        self.rules = UserRules(session)

    @property
    def supports_queryable_users(self) -> bool:
        return True

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.repo.get_user_by_id(user_id)

    async def create(self, user: User) -> IdentityResult:
        errors: List[IdentityError] = []
        if not user.user_name:
            errors.append(_error("InvalidUserName", "User name is required."))
        elif not await self.rules.is_user_name_unique(user.user_name):
            errors.append(_error("DuplicateUserName", f"User name '{user.user_name}' is already taken."))

        try:
            _email_adapter.validate_python(user.email)
        except ValidationError:
            errors.append(_error("InvalidEmail", f"Email '{user.email}' is invalid."))
        else:
            if not await self.rules.is_user_email_unique(user.email):
                errors.append(_error("DuplicateEmail", f"Email '{user.email}' is already taken."))

        if errors:
            return IdentityResult.failed(*errors)

        await self.repo.create_user(user)
        logger.info("Created user %s (%s)", user.id, user.user_name)
        return IdentityResult.success()

    async def add_to_role(self, user: User, role_name: str) -> IdentityResult:
        role = await self.repo.get_role_by_name(role_name)
        if role is None:
            return IdentityResult.failed(_error("RoleNotFound", f"Role {role_name} does not exist."))
        if await self.repo.is_user_in_role(user.id, role.id):
            return IdentityResult.failed(_error("UserAlreadyInRole", f"User already in role '{role.name}'."))
        await self.repo.assign_role_to_user(user.id, role.id)
        return IdentityResult.success()

    async def remove_from_role(self, user: User, role_name: str) -> IdentityResult:
        role = await self.repo.get_role_by_name(role_name)
        if role is None:
            return IdentityResult.failed(_error("RoleNotFound", f"Role {role_name} does not exist."))
        if not await self.repo.is_user_in_role(user.id, role.id):
            return IdentityResult.failed(_error("UserNotInRole", f"User is not in role '{role.name}'."))
        await self.repo.remove_role_from_user(user.id, role.id)
        return IdentityResult.success()

    async def delete(self, user: User) -> IdentityResult:
        await self.repo.delete_user(user.id)
        return IdentityResult.success()

    async def get_roles(self, user: User) -> List[str]:
        return [r.name for r in await self.repo.list_roles_for_user(user.id)]

    async def count_users(self) -> int:
        return await self.repo.count_users()

    async def list_users(self, skip: int = 0, take: Optional[int] = None) -> List[User]:
        return await self.repo.list_users_by_email(offset=skip, limit=take)


class SqlRoleManager:
    """RoleManager backed by the roles table."""

    def __init__(self, session: AsyncSession) -> None:
        self.repo = SecurityRepository(session)

    async def list_roles(self) -> List[Role]:
        return await self.repo.list_roles()

    async def find_by_name(self, name: str) -> Optional[Role]:
        return await self.repo.get_role_by_name(name)
