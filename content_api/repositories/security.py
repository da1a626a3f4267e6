from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, delete


from content_api.db.models.security import User, Role, UserRole
from .base import BaseRepository


class SecurityRepository(BaseRepository):
    """Repository for users, roles and role assignments."""

    # Users
    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return await self.scalar_one_or_none(stmt)

    async def get_user_by_user_name(self, user_name: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.user_name) == user_name.lower())
        return await self.scalar_one_or_none(stmt)

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        return await self.scalar_one_or_none(stmt)

    async def count_users(self) -> int:
        stmt = select(func.count(User.id))
        return int(await self.scalar_one(stmt))

    async def count_users_with_user_name(self, user_name: str, exclude_id: Optional[UUID] = None) -> int:
        stmt = select(func.count(User.id)).where(func.lower(User.user_name) == user_name.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return int(await self.scalar_one(stmt))

    async def count_users_with_email(self, email: str, exclude_id: Optional[UUID] = None) -> int:
        stmt = select(func.count(User.id)).where(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return int(await self.scalar_one(stmt))

    async def list_users_by_email(self, offset: int = 0, limit: Optional[int] = None) -> List[User]:
        """List users ordered by email; limit None returns everything after offset."""
        stmt = select(User).order_by(User.email).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.scalars(stmt)
        return list(result)

    async def create_user(self, user: User) -> User:
        await self.add(user)
        await self.commit()
        # refresh loaded state by reloading
        return (await self.get_user_by_id(user.id))  # type: ignore

    async def delete_user(self, user_id: UUID) -> None:
        await self.execute(delete(UserRole).where(UserRole.user_id == user_id))
        await self.execute(delete(User).where(User.id == user_id))
        await self.commit()

    async def list_roles_for_user(self, user_id: UUID) -> List[Role]:
        stmt = (
            select(Role)
            .join(UserRole, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id)
        )
        result = await self.scalars(stmt)
        return list(result)

    async def is_user_in_role(self, user_id: UUID, role_id: UUID) -> bool:
        stmt = select(func.count(UserRole.id)).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        return int(await self.scalar_one(stmt)) > 0

    # Roles
    async def list_roles(self, limit: Optional[int] = None, offset: int = 0) -> List[Role]:
        stmt = select(Role).order_by(Role.name).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        res = await self.scalars(stmt)
        return list(res)

    async def get_role_by_id(self, role_id: UUID) -> Optional[Role]:
        stmt = select(Role).where(Role.id == role_id)
        return await self.scalar_one_or_none(stmt)

    async def get_role_by_name(self, name: str) -> Optional[Role]:
        stmt = select(Role).where(func.lower(Role.name) == name.lower())
        return await self.scalar_one_or_none(stmt)

    async def create_role(self, name: str, description: Optional[str] = None) -> Role:
        role = Role(name=name, description=description)
        await self.add(role)
        await self.commit()
        return (await self.get_role_by_name(name))  # type: ignore

    async def delete_role(self, role_id: UUID) -> None:
        await self.execute(delete(UserRole).where(UserRole.role_id == role_id))
        await self.execute(delete(Role).where(Role.id == role_id))
        await self.commit()

    # Associations
    async def assign_role_to_user(self, user_id: UUID, role_id: UUID) -> None:
        assoc = UserRole(user_id=user_id, role_id=role_id)
        await self.add(assoc)
        await self.commit()

    async def remove_role_from_user(self, user_id: UUID, role_id: UUID) -> None:
        stmt = delete(UserRole).where(UserRole.user_id == user_id, UserRole.role_id == role_id)
        await self.execute(stmt)
        await self.commit()
