"""
Identity collaborators: the user/role manager contracts used by the user
service, their SQLAlchemy implementation, and the request principal.
"""

from .manager import (  # noqa: F401
    IdentityError,
    IdentityManager,
    IdentityResult,
    RoleManager,
    SqlIdentityManager,
    SqlRoleManager,
)
from .principal import Principal  # noqa: F401
from .pseudo_roles import PseudoRole, PseudoRoleNames  # noqa: F401
