"""FastAPI dependency wiring for the catalog services.

Keeping the factories here leaves the service modules free of web-layer
imports, so tests can build services directly around an ``AsyncSession``.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.db.connection import get_db
from movie_catalog.db.repositories import (
    FavouritesRepository,
    MovieRepository,
    UserRepository,
)
from movie_catalog.services.errors import UserNotFoundError
from movie_catalog.services.favourites_service import FavouritesService
from movie_catalog.services.identity import get_identity_claim
from movie_catalog.services.movie_service import MovieService


def get_favourites_service(
    session: AsyncSession = Depends(get_db),
) -> FavouritesService:
    """Wire the three repositories the favourites rules depend on."""

    return FavouritesService(
        favourites=FavouritesRepository(session),
        movies=MovieRepository(session),
        users=UserRepository(session),
    )


def get_movie_service(session: AsyncSession = Depends(get_db)) -> MovieService:
    return MovieService(MovieRepository(session))


async def get_current_user_id(
    claim: str = Depends(get_identity_claim),
    service: FavouritesService = Depends(get_favourites_service),
) -> int:
    """Resolve the authenticated caller to a user id, 404 when unknown."""

    try:
        user = await service.resolve_user(claim)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return user.id


__all__ = ["get_current_user_id", "get_favourites_service", "get_movie_service"]
