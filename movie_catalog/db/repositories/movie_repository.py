"""Queries and mutations for movies and their comments."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from movie_catalog.db.models import Comment, Movie
from movie_catalog.db.repositories.base import BaseRepository


class MovieRepository(BaseRepository):
    """Encapsulates SQLAlchemy operations over the movie catalog."""

    async def find_movies_by_ids(self, ids: Iterable[int]) -> list[Movie]:
        """Return the movies whose ids appear in ``ids``; unknown ids are skipped."""

        wanted = set(ids)
        if not wanted:
            return []
        query = select(Movie).where(Movie.id.in_(wanted)).order_by(Movie.id)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_added_between(
        self, *, start: datetime, end: datetime
    ) -> list[Movie]:
        """Movies added within ``[start, end]``, newest release year first."""

        query = (
            select(Movie)
            .where(Movie.added_at >= start, Movie.added_at <= end)
            .order_by(Movie.release_year.desc(), Movie.id)
        )
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def get(self, movie_id: int) -> Movie | None:
        return await self._session.get(Movie, movie_id)

    async def get_with_comments(self, movie_id: int) -> Movie | None:
        query = (
            select(Movie)
            .options(selectinload(Movie.comments))
            .execution_options(populate_existing=True)
            .where(Movie.id == movie_id)
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def get_for_delete(self, movie_id: int) -> Movie | None:
        """Load a movie with every collection the unit of work must clean up."""

        query = (
            select(Movie)
            .options(selectinload(Movie.comments), selectinload(Movie.favourites))
            .execution_options(populate_existing=True)
            .where(Movie.id == movie_id)
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def exists(self, movie_id: int) -> bool:
        result = await self._session.execute(select(Movie.id).where(Movie.id == movie_id))
        return result.scalar_one_or_none() is not None

    async def add(self, movie: Movie) -> Movie:
        self._session.add(movie)
        await self._session.flush()
        return movie

    async def delete(self, movie: Movie) -> None:
        await self._session.delete(movie)

    async def get_comment(self, *, movie_id: int, comment_id: int) -> Comment | None:
        """Return the comment only when it belongs to ``movie_id``."""

        query = select(Comment).where(
            Comment.id == comment_id, Comment.movie_id == movie_id
        )
        result = await self._session.execute(query)
        return result.scalars().first()

    async def comment_exists(self, *, movie_id: int, comment_id: int) -> bool:
        query = select(Comment.id).where(
            Comment.id == comment_id, Comment.movie_id == movie_id
        )
        result = await self._session.execute(query)
        return result.scalar_one_or_none() is not None

    async def add_comment(self, movie: Movie, comment: Comment) -> Comment:
        movie.comments.append(comment)
        await self._session.flush()
        return comment

    async def delete_comment(self, comment: Comment) -> None:
        await self._session.delete(comment)
