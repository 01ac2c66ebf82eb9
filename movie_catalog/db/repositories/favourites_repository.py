"""Database-oriented helpers for yearly favourites lists.

Every lookup filters on the owning ``user_id``; there is no unscoped "load by
id" helper.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from movie_catalog.db.models import Favourites, Movie
from movie_catalog.db.repositories.base import BaseRepository


def _with_relationships():
    """Loader options that hydrate the owner and movie set in one round trip each.

    Queries pair these with ``populate_existing`` so rows already in the session
    identity map are refreshed rather than returned with stale collections.
    """

    return (
        selectinload(Favourites.movies),
        selectinload(Favourites.user),
    )


class FavouritesRepository(BaseRepository):
    """Encapsulates SQLAlchemy operations required by the favourites domain."""

    async def list_for_user(self, *, user_id: int) -> list[Favourites]:
        """Return the user's favourites, newest year first."""

        query = (
            select(Favourites)
            .options(*_with_relationships())
            .execution_options(populate_existing=True)
            .where(Favourites.user_id == user_id)
            .order_by(Favourites.year.desc())
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def find_for_user_year(
        self, *, user_id: int, year: int
    ) -> Favourites | None:
        """Return the first favourites list owned by ``user_id`` for ``year``."""

        query = (
            select(Favourites)
            .options(*_with_relationships())
            .execution_options(populate_existing=True)
            .where(Favourites.user_id == user_id, Favourites.year == year)
            .order_by(Favourites.id)
            .limit(1)
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def find_owned(
        self, *, user_id: int, favourites_id: int
    ) -> Favourites | None:
        """Return the list only when ``favourites_id`` belongs to ``user_id``."""

        query = (
            select(Favourites)
            .options(*_with_relationships())
            .execution_options(populate_existing=True)
            .where(Favourites.id == favourites_id, Favourites.user_id == user_id)
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def exists(self, *, user_id: int, favourites_id: int) -> bool:
        """Check for the row without loading relationships."""

        query = select(Favourites.id).where(
            Favourites.id == favourites_id, Favourites.user_id == user_id
        )
        result = await self._session.execute(query)
        return result.scalar_one_or_none() is not None

    async def insert(self, favourites: Favourites) -> Favourites:
        """Stage a new favourites list; the row is written on commit."""

        self._session.add(favourites)
        return favourites

    async def replace_movies(
        self, favourites: Favourites, movies: Sequence[Movie]
    ) -> Favourites:
        """Swap the whole movie set; association rows are diffed on flush."""

        favourites.movies = list(movies)
        return favourites

    async def delete(self, *, user_id: int, favourites_id: int) -> bool:
        """Delete the owned list; association rows go with it via ``ON DELETE CASCADE``.

        Returns ``False`` when no row matched, e.g. because another request
        removed the list after it was loaded.
        """

        result = await self._session.execute(
            delete(Favourites).where(
                Favourites.id == favourites_id, Favourites.user_id == user_id
            )
        )
        return result.rowcount > 0
