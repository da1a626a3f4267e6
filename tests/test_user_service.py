from __future__ import annotations

import uuid
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from content_api.core.errors import ErrorKind, IdentityOperationError, UserNotFoundError
from content_api.db.models.security import Role, User
from content_api.identity.manager import IdentityError, IdentityResult
from content_api.identity.principal import Principal
from content_api.identity.pseudo_roles import PseudoRoleNames
from content_api.schemas.users import UsersQuery
from content_api.services.users import UserService


def _user(email: str) -> User:
    return User(id=uuid.uuid4(), user_name=email, email=email, is_active=True)


def _role(name: str) -> Role:
    return Role(id=uuid.uuid4(), name=name, description=None)


class FakeIdentityManager:
    """In-memory user store; list_users honours skip/take over email order."""

    def __init__(self, users: Optional[List[User]] = None, queryable: bool = True) -> None:
        self.users = sorted(users or [], key=lambda u: u.email)
        self.queryable = queryable
        self.roles: dict = {}

    @property
    def supports_queryable_users(self) -> bool:
        return self.queryable

    async def find_by_id(self, user_id):
        return next((u for u in self.users if u.id == user_id), None)

    async def count_users(self) -> int:
        return len(self.users)

    async def list_users(self, skip: int = 0, take: Optional[int] = None):
        rest = self.users[skip:]
        return rest if take is None else rest[:take]

    async def get_roles(self, user):
        return list(self.roles.get(user.id, []))


def _service(manager, roles: Optional[List[Role]] = None) -> UserService:
    role_manager = MagicMock()
    role_manager.list_roles = AsyncMock(return_value=roles or [])
    return UserService(manager, role_manager)


def _users(count: int) -> List[User]:
    return [_user(f"user{i:02d}@example.com") for i in range(count)]


# Listing


@pytest.mark.asyncio
async def test_users_view_model_pages_by_email():
    service = _service(FakeIdentityManager(_users(25)))

    model = await service.get_users_view_model(UsersQuery(start_index=10, number_of_users=10))

    assert model.total_records == 25
    assert model.number_of_pages == 3
    assert [u.email for u in model.users] == [f"user{i:02d}@example.com" for i in range(10, 20)]


@pytest.mark.asyncio
async def test_users_view_model_last_partial_page():
    service = _service(FakeIdentityManager(_users(25)))

    model = await service.get_users_view_model(UsersQuery(start_index=20, number_of_users=10))

    assert len(model.users) == 5


@pytest.mark.asyncio
async def test_zero_page_size_returns_all_remaining_on_one_page():
    service = _service(FakeIdentityManager(_users(7)))

    model = await service.get_users_view_model(UsersQuery(start_index=2, number_of_users=0))

    assert len(model.users) == 5
    assert model.total_records == 7
    assert model.number_of_pages == 1


@pytest.mark.asyncio
async def test_zero_page_size_with_no_users_has_no_pages():
    service = _service(FakeIdentityManager([]))

    model = await service.get_users_view_model(UsersQuery(start_index=0, number_of_users=0))

    assert model.users == []
    assert model.total_records == 0
    assert model.number_of_pages == 0


@pytest.mark.asyncio
async def test_store_without_queryable_users_gives_empty_model():
    service = _service(FakeIdentityManager(_users(3), queryable=False))

    model = await service.get_users_view_model(UsersQuery())

    assert model.users == []
    assert model.total_records == 0
    assert model.number_of_pages == 0


# Roles view


@pytest.mark.asyncio
async def test_user_roles_view_model_splits_assigned_and_available():
    user = _user("ann@example.com")
    manager = FakeIdentityManager([user])
    manager.roles[user.id] = ["Editor", "Admin"]
    service = _service(manager, roles=[_role("Viewer"), _role("Editor"), _role("Admin"), _role("Author")])

    model = await service.get_user_roles_view_model(user.id)

    assert model.user.id == user.id
    assert model.user_roles == ["Admin", "Editor"]
    assert [r.name for r in model.available_roles] == ["Author", "Viewer"]


@pytest.mark.asyncio
async def test_user_roles_view_model_unknown_user_is_none():
    service = _service(FakeIdentityManager([]))

    assert await service.get_user_roles_view_model(uuid.uuid4()) is None


# Authorization


@pytest.fixture
def auth_service() -> UserService:
    return _service(FakeIdentityManager([]))


def test_no_principal_or_roles_is_unauthorized(auth_service):
    member = Principal.for_user("u1", ["Editor"])

    assert auth_service.is_user_authorized(None, ["Everyone"]) is False
    assert auth_service.is_user_authorized(member, None) is False
    assert auth_service.is_user_authorized(member, []) is False


def test_everyone_matches_anonymous_principal(auth_service):
    assert auth_service.is_user_authorized(Principal.anonymous(), ["Everyone"]) is True


def test_anonymous_role_matches_only_unauthenticated(auth_service):
    assert auth_service.is_user_authorized(Principal.anonymous(), ["Anonymous"]) is True


def test_registered_requires_membership(auth_service):
    member = Principal.for_user("u1", ["Editor"])
    registered = Principal.for_user("u2", ["Registered"])

    assert auth_service.is_user_authorized(member, ["Registered"]) is False
    assert auth_service.is_user_authorized(Principal.anonymous(), ["Registered"]) is False
    assert auth_service.is_user_authorized(registered, ["Registered"]) is True


def test_authenticated_principal_matches_any_other_role(auth_service):
    member = Principal.for_user("u1", [])

    assert auth_service.is_user_authorized(member, ["Administrator"]) is True
    assert auth_service.is_user_authorized(member, ["Anonymous"]) is True


def test_anonymous_principal_needs_a_matching_role(auth_service):
    anonymous = Principal.anonymous()

    assert auth_service.is_user_authorized(anonymous, ["Administrator"]) is False
    assert auth_service.is_user_authorized(anonymous, ["Administrator", "Anonymous"]) is True


def test_role_objects_are_accepted(auth_service):
    assert auth_service.is_user_authorized(Principal.anonymous(), [_role("Everyone")]) is True


def test_pseudo_role_names_are_configurable():
    names = PseudoRoleNames(everyone="All", registered="Members", anonymous="Guests")
    service = UserService(FakeIdentityManager([]), MagicMock(), names)

    assert service.is_user_authorized(Principal.anonymous(), ["All"]) is True
    assert service.is_user_authorized(Principal.anonymous(), ["Everyone"]) is False
    assert service.is_user_authorized(Principal.anonymous(), ["Guests"]) is True
    assert service.is_user_authorized(Principal.for_user("u1", []), ["Members"]) is False


# Commands


@pytest.mark.parametrize(
    "call",
    [
        lambda s, uid: s.add_user_to_role(uid, "Editor"),
        lambda s, uid: s.remove_user_from_role(uid, "Editor"),
        lambda s, uid: s.delete_user(uid),
    ],
    ids=["add_to_role", "remove_from_role", "delete"],
)
@pytest.mark.asyncio
async def test_commands_on_unknown_user_raise_before_store_call(call):
    manager = MagicMock()
    manager.find_by_id = AsyncMock(return_value=None)
    manager.add_to_role = AsyncMock()
    manager.remove_from_role = AsyncMock()
    manager.delete = AsyncMock()
    service = UserService(manager, MagicMock())

    with pytest.raises(UserNotFoundError) as exc_info:
        await call(service, uuid.uuid4())

    assert exc_info.value.message == "User Not Found."
    assert exc_info.value.kind == ErrorKind.NOT_FOUND
    manager.add_to_role.assert_not_called()
    manager.remove_from_role.assert_not_called()
    manager.delete.assert_not_called()


@pytest.mark.asyncio
async def test_add_user_to_role_passes_through_on_success():
    user = _user("ann@example.com")
    manager = MagicMock()
    manager.find_by_id = AsyncMock(return_value=user)
    manager.add_to_role = AsyncMock(return_value=IdentityResult.success())
    service = UserService(manager, MagicMock())

    await service.add_user_to_role(user.id, "Editor")

    manager.add_to_role.assert_awaited_once_with(user, "Editor")


@pytest.mark.asyncio
async def test_store_errors_are_joined_with_newlines():
    user = _user("ann@example.com")
    manager = MagicMock()
    manager.find_by_id = AsyncMock(return_value=user)
    manager.delete = AsyncMock(
        return_value=IdentityResult.failed(
            IdentityError(code="ConcurrencyFailure", description="Optimistic concurrency failure."),
            IdentityError(code="Locked", description="User is locked."),
        )
    )
    service = UserService(manager, MagicMock())

    with pytest.raises(IdentityOperationError) as exc_info:
        await service.delete_user(user.id)

    assert exc_info.value.message == "Optimistic concurrency failure.\nUser is locked."
    assert exc_info.value.codes == ["ConcurrencyFailure", "Locked"]
    assert exc_info.value.kind == ErrorKind.COLLABORATOR_ERROR


@pytest.mark.asyncio
async def test_create_user_uses_email_as_user_name():
    manager = MagicMock()
    manager.create = AsyncMock(return_value=IdentityResult.success())
    service = UserService(manager, MagicMock())

    user = await service.create_user("bob@example.com")

    assert user.user_name == "bob@example.com"
    assert user.email == "bob@example.com"
    manager.create.assert_awaited_once_with(user)


@pytest.mark.asyncio
async def test_create_user_failure_raises():
    manager = MagicMock()
    manager.create = AsyncMock(
        return_value=IdentityResult.failed(IdentityError(code="DuplicateEmail", description="Email taken."))
    )
    service = UserService(manager, MagicMock())

    with pytest.raises(IdentityOperationError) as exc_info:
        await service.create_user("bob@example.com")

    assert str(exc_info.value) == "Email taken."


def test_role_names_match_exactly():
    registered = Principal.for_user("u1", ["registered"])

    assert registered.is_in_role("registered") is True
    assert registered.is_in_role("Registered") is False


def test_registered_membership_is_case_sensitive(auth_service):
    lower = Principal.for_user("u1", ["registered"])

    assert auth_service.is_user_authorized(lower, ["Registered"]) is False
