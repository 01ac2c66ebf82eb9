"""Base repository shared by the catalog repositories.

Repositories expose named, filter-specific coroutines that return concrete
results (lists, a single entity, or ``None``) instead of query objects, so the
services never compose SQL themselves.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession


class BaseRepository:
    """Holds the request session and exposes its transaction boundaries."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def commit(self) -> None:
        """Flush and commit every change made through this session atomically."""

        await self._session.commit()

    async def rollback(self) -> None:
        """Discard pending changes after a failed flush or commit."""

        await self._session.rollback()
