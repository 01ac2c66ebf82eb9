"""Catalog operations over movies and their comment threads."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.orm.exc import StaleDataError

from movie_catalog.db.models import Comment, Movie
from movie_catalog.db.repositories import MovieRepository
from movie_catalog.schemas.comment import CommentPayload, CommentView
from movie_catalog.schemas.movie import (
    MovieCreate,
    MovieUpdate,
    MovieView,
    MovieWithComments,
)
from movie_catalog.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

# The first movie ever was made in 1888, so nothing in the catalog predates it.
EARLIEST_ADDED_AT = datetime(1888, 1, 1, tzinfo=UTC)


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_boundary(value: str | None, *, default: datetime) -> datetime:
    """Parse an ISO-8601 date or datetime query value, falling back to ``default``."""

    if value is None or not value.strip():
        return default
    try:
        return _as_utc(datetime.fromisoformat(value.strip()))
    except ValueError as exc:
        raise InvalidInputError(f"Invalid date '{value}'; expected ISO-8601") from exc


class MovieService:
    """Coordinates :class:`MovieRepository` for the ``/movies`` endpoints."""

    def __init__(self, repository: MovieRepository) -> None:
        self._repository = repository

    async def list_movies(
        self, *, start_date: str | None = None, end_date: str | None = None
    ) -> list[MovieView]:
        """Movies added between the two boundaries, newest release year first."""

        start = parse_boundary(start_date, default=EARLIEST_ADDED_AT)
        end = parse_boundary(end_date, default=datetime.now(UTC))
        movies = await self._repository.list_added_between(start=start, end=end)
        return [MovieView.model_validate(movie) for movie in movies]

    async def get_movie(self, movie_id: int) -> MovieView:
        movie = await self._repository.get(movie_id)
        if movie is None:
            raise NotFoundError(f"Movie {movie_id} not found")
        return MovieView.model_validate(movie)

    async def get_movie_with_comments(self, movie_id: int) -> MovieWithComments:
        movie = await self._repository.get_with_comments(movie_id)
        if movie is None:
            raise NotFoundError(f"Movie {movie_id} not found")
        return MovieWithComments.model_validate(movie)

    async def create_movie(self, payload: MovieCreate) -> MovieView:
        values = payload.model_dump()
        values["added_at"] = _as_utc(payload.added_at or datetime.now(UTC))
        movie = Movie(**values)
        await self._repository.add(movie)
        await self._repository.commit()
        logger.info("Added movie %s (%s)", movie.id, movie.title)
        return MovieView.model_validate(movie)

    async def update_movie(self, movie_id: int, payload: MovieUpdate) -> None:
        """Overwrite every field of an existing movie."""

        if payload.id != movie_id:
            raise InvalidInputError("Movie id in the path does not match the body")

        movie = await self._repository.get(movie_id)
        if movie is None:
            raise NotFoundError(f"Movie {movie_id} not found")

        values = payload.model_dump(exclude={"id"})
        if payload.added_at is None:
            values.pop("added_at")
        else:
            values["added_at"] = _as_utc(payload.added_at)
        for field, value in values.items():
            setattr(movie, field, value)

        try:
            await self._repository.commit()
        except StaleDataError:
            await self._repository.rollback()
            if not await self._repository.exists(movie_id):
                raise NotFoundError(f"Movie {movie_id} not found") from None
            raise
        logger.info("Updated movie %s", movie_id)

    async def delete_movie(self, movie_id: int) -> None:
        """Delete a movie together with its comments and favourites memberships."""

        movie = await self._repository.get_for_delete(movie_id)
        if movie is None:
            raise NotFoundError(f"Movie {movie_id} not found")
        await self._repository.delete(movie)
        await self._repository.commit()
        logger.info("Deleted movie %s", movie_id)

    async def add_comment(self, movie_id: int, payload: CommentPayload) -> CommentView:
        movie = await self._repository.get_with_comments(movie_id)
        if movie is None:
            raise NotFoundError(f"Movie {movie_id} not found")

        comment = Comment(text=payload.text, important=payload.important)
        await self._repository.add_comment(movie, comment)
        await self._repository.commit()
        logger.info("Added comment %s to movie %s", comment.id, movie_id)
        return CommentView.model_validate(comment)

    async def update_comment(
        self, movie_id: int, comment_id: int, payload: CommentPayload
    ) -> None:
        if payload.id != comment_id:
            raise InvalidInputError("Comment id in the path does not match the body")
        if payload.movie_id is None:
            raise InvalidInputError("movie_id is required")
        if payload.movie_id != movie_id:
            raise InvalidInputError("Comments cannot be moved to another movie")

        comment = await self._repository.get_comment(
            movie_id=movie_id, comment_id=comment_id
        )
        if comment is None:
            raise NotFoundError(f"Comment {comment_id} not found")

        comment.text = payload.text
        comment.important = payload.important
        try:
            await self._repository.commit()
        except StaleDataError:
            await self._repository.rollback()
            if not await self._repository.comment_exists(
                movie_id=movie_id, comment_id=comment_id
            ):
                raise NotFoundError(f"Comment {comment_id} not found") from None
            raise

    async def delete_comment(self, movie_id: int, comment_id: int) -> None:
        comment = await self._repository.get_comment(
            movie_id=movie_id, comment_id=comment_id
        )
        if comment is None:
            raise NotFoundError(f"Comment {comment_id} not found")
        await self._repository.delete_comment(comment)
        await self._repository.commit()
        logger.info("Deleted comment %s from movie %s", comment_id, movie_id)
