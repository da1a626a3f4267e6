from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """
    Base class for services that work on one request-scoped session.

    Subclasses build the repositories and rules they need on top of it and
    keep orchestration here, leaving queries to the repositories.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
