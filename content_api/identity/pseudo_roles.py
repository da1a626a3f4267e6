from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from content_api.core.settings import AppSettings


class PseudoRole(str, enum.Enum):
    """Role names with special authorization meaning; never assigned to users."""
    EVERYONE = "everyone"
    REGISTERED = "registered"
    ANONYMOUS = "anonymous"


class PseudoRoleNames(BaseModel):
    """The configured name of each pseudo-role."""
    model_config = ConfigDict(frozen=True)

    everyone: str = "Everyone"
    registered: str = "Registered"
    anonymous: str = "Anonymous"

    def name_of(self, role: PseudoRole) -> str:
        return getattr(self, role.value)

    def classify(self, role_name: str) -> Optional[PseudoRole]:
        """Return the pseudo-role a name stands for, or None for a real role."""
        for role in PseudoRole:
            if self.name_of(role) == role_name:
                return role
        return None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "PseudoRoleNames":
        return cls(
            everyone=settings.EVERYONE_ROLE_NAME,
            registered=settings.REGISTERED_ROLE_NAME,
            anonymous=settings.ANONYMOUS_ROLE_NAME,
        )
