from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


class Principal(BaseModel):
    """
    The caller on whose behalf a request runs.

    An anonymous principal has no subject and no roles. Role membership is an
    exact, case-sensitive match on the role name.
    """
    model_config = ConfigDict(frozen=True)

    subject: Optional[str] = Field(default=None, description="User id from the token 'sub' claim")
    roles: FrozenSet[str] = Field(default_factory=frozenset)
    authenticated: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated

    def is_in_role(self, role: str) -> bool:
        return role in self.roles

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()

    @classmethod
    def for_user(cls, subject: str, roles: Iterable[str]) -> "Principal":
        return cls(subject=subject, roles=frozenset(roles), authenticated=True)
