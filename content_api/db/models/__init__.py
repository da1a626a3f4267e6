"""
ORM models for site content (menus) and security (users, roles).

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .menus import (  # noqa: F401
    Menu,
    MenuItem,
    MenuItemLocalisation,
)
from .security import (  # noqa: F401
    User,
    Role,
    UserRole,
)
