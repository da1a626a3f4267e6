from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Union
from uuid import UUID

from content_api.core.errors import IdentityOperationError, UserNotFoundError
from content_api.db.models.security import Role, User
from content_api.identity.manager import IdentityManager, IdentityResult, RoleManager
from content_api.identity.principal import Principal
from content_api.identity.pseudo_roles import PseudoRole, PseudoRoleNames
from content_api.schemas.users import (
    RoleRead,
    UserRead,
    UserRolesViewModel,
    UsersQuery,
    UsersViewModel,
)

logger = logging.getLogger(__name__)


class UserService:
    """
    User administration and authorization on top of the identity collaborators.

    Holds no state between calls; the managers own the user store.
    """

    def __init__(
        self,
        user_manager: IdentityManager,
        role_manager: RoleManager,
        pseudo_roles: Optional[PseudoRoleNames] = None,
    ) -> None:
        self.user_manager = user_manager
        self.role_manager = role_manager
        self.pseudo_roles = pseudo_roles or PseudoRoleNames()

    # PUBLIC_INTERFACE
    async def get_users_view_model(self, query: UsersQuery) -> UsersViewModel:
        """
        Return one page of users ordered by email.

        number_of_users == 0 returns every user after start_index on a single
        page. A store without queryable users yields an empty model.
        """
        if not self.user_manager.supports_queryable_users:
            return UsersViewModel(users=[], total_records=0, number_of_pages=0)

        total_records = await self.user_manager.count_users()
        take = query.number_of_users if query.number_of_users > 0 else None
        users = await self.user_manager.list_users(skip=query.start_index, take=take)

        if query.number_of_users > 0:
            number_of_pages = math.ceil(total_records / query.number_of_users)
        else:
            number_of_pages = 1 if total_records > 0 else 0

        return UsersViewModel(
            users=[UserRead.model_validate(u) for u in users],
            total_records=total_records,
            number_of_pages=number_of_pages,
        )

    # PUBLIC_INTERFACE
    async def get_user_roles_view_model(self, user_id: UUID) -> Optional[UserRolesViewModel]:
        """Return the user with its roles and the roles it does not hold, or None."""
        user = await self.user_manager.find_by_id(user_id)
        if user is None:
            return None

        user_roles = await self.user_manager.get_roles(user)
        assigned = set(user_roles)
        available = [r for r in await self.role_manager.list_roles() if r.name not in assigned]

        return UserRolesViewModel(
            user=UserRead.model_validate(user),
            user_roles=sorted(user_roles),
            available_roles=[RoleRead.model_validate(r) for r in sorted(available, key=lambda r: r.name)],
        )

    # PUBLIC_INTERFACE
    def is_user_authorized(
        self,
        principal: Optional[Principal],
        roles: Optional[Iterable[Union[str, Role]]],
    ) -> bool:
        """
        Check a principal against a list of role names (or Role objects).

        Roles are tried in order and the first match wins:
          1. the Everyone pseudo-role always matches;
          2. any role other than Registered matches an authenticated principal;
          3. the Anonymous pseudo-role matches an unauthenticated principal;
          4. otherwise the principal must hold the role.
        """
        if principal is None or roles is None:
            return False
        role_names = [r if isinstance(r, str) else r.name for r in roles]
        if not role_names:
            return False

        everyone = self.pseudo_roles.name_of(PseudoRole.EVERYONE)
        registered = self.pseudo_roles.name_of(PseudoRole.REGISTERED)
        anonymous = self.pseudo_roles.name_of(PseudoRole.ANONYMOUS)

        for role in role_names:
            if role == everyone:
                return True
            # TODO: decide whether an authenticated principal should really satisfy every non-Registered role.
            if role != registered and principal.is_authenticated:
                return True
            if role == anonymous and not principal.is_authenticated:
                return True
            if principal.is_in_role(role):
                return True

        return False

    # PUBLIC_INTERFACE
    async def create_user(self, email: str) -> User:
        """Create a user whose user name is its email."""
        user = User(user_name=email, email=email)
        result = await self.user_manager.create(user)
        self._raise_on_failure(result, "create user", email)
        return user

    # PUBLIC_INTERFACE
    async def add_user_to_role(self, user_id: UUID, role_name: str) -> None:
        user = await self._get_user_or_raise(user_id)
        result = await self.user_manager.add_to_role(user, role_name)
        self._raise_on_failure(result, "add role", role_name)
        logger.info("Added user %s to role %s", user_id, role_name)

    # PUBLIC_INTERFACE
    async def remove_user_from_role(self, user_id: UUID, role_name: str) -> None:
        user = await self._get_user_or_raise(user_id)
        result = await self.user_manager.remove_from_role(user, role_name)
        self._raise_on_failure(result, "remove role", role_name)
        logger.info("Removed user %s from role %s", user_id, role_name)

    # PUBLIC_INTERFACE
    async def delete_user(self, user_id: UUID) -> None:
        user = await self._get_user_or_raise(user_id)
        result = await self.user_manager.delete(user)
        self._raise_on_failure(result, "delete user", str(user_id))
        logger.info("Deleted user %s", user_id)

    async def _get_user_or_raise(self, user_id: UUID) -> User:
        user = await self.user_manager.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    @staticmethod
    def _raise_on_failure(result: IdentityResult, action: str, target: str) -> None:
        if result.succeeded:
            return
        logger.warning(
            "Identity store rejected %s for %s: %s", action, target, ", ".join(e.code for e in result.errors)
        )
        raise IdentityOperationError(result.errors)
