from __future__ import annotations

from sqlalchemy import select

from movie_catalog.db.models import User
from movie_catalog.db.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Lookups against the users table."""

    async def find_user(self, username: str) -> User | None:
        """Return the user whose username matches the identity claim."""

        query = select(User).where(User.username == username)
        result = await self._session.execute(query)
        return result.scalars().first()

    async def add(self, user: User) -> User:
        self._session.add(user)
        await self._session.flush()
        return user
