from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UsersQuery(BaseModel):
    """Paging request for the user list."""
    start_index: int = Field(0, ge=0, description="Number of users to skip")
    number_of_users: int = Field(
        10, ge=0, description="Page size; 0 returns every user after start_index"
    )


class UserRead(BaseModel):
    """User read model."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="User ID")
    user_name: str = Field(..., description="User name")
    email: str = Field(..., description="User email")
    is_active: bool = Field(..., description="Active flag")


class RoleRead(BaseModel):
    """Role read model."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Role ID")
    name: str = Field(..., description="Role name")
    description: Optional[str] = Field(None)


class UsersViewModel(BaseModel):
    """One page of users plus the totals needed to render a pager."""
    users: List[UserRead] = Field(default_factory=list)
    total_records: int = 0
    number_of_pages: int = 0


class UserRolesViewModel(BaseModel):
    """A user, the roles it holds and the roles it could be given."""
    user: UserRead
    user_roles: List[str] = Field(default_factory=list, description="Assigned role names, alphabetical")
    available_roles: List[RoleRead] = Field(default_factory=list, description="Unassigned roles, by name")


class UserCreate(BaseModel):
    """Admin create user payload."""
    email: EmailStr = Field(..., description="Email, also used as user name")


class RoleCreate(BaseModel):
    """Create role payload."""
    name: str = Field(..., min_length=1, description="Role name")
    description: Optional[str] = Field(None, description="Description")
