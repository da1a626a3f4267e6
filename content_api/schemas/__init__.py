"""
Public Pydantic schemas used by FastAPI routes, services, and tests.

Schemas are grouped by area (menus, users) and also include common reusable
models such as standard responses and the error envelope.
"""

from .common import MessageResponse  # noqa: F401
