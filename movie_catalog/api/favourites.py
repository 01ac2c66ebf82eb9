"""FastAPI router exposing the caller's yearly favourites lists."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from movie_catalog.schemas.favourites import (
    FAVOURITES_MAX_YEAR,
    FAVOURITES_MIN_YEAR,
    FavouritesCreate,
    FavouritesCreated,
    FavouritesUpdate,
    FavouritesView,
)
from movie_catalog.services.dependencies import (
    get_current_user_id,
    get_favourites_service,
)
from movie_catalog.services.errors import InvalidInputError, NotFoundError
from movie_catalog.services.favourites_service import FavouritesService

router = APIRouter()


@router.get("", response_model=list[FavouritesView])
async def list_favourites(
    user_id: int = Depends(get_current_user_id),
    service: FavouritesService = Depends(get_favourites_service),
) -> list[FavouritesView]:
    """Return every favourites list owned by the caller, newest year first."""

    return await service.list_all(user_id=user_id)


@router.post("", response_model=FavouritesCreated, status_code=status.HTTP_200_OK)
async def create_favourites(
    payload: FavouritesCreate,
    user_id: int = Depends(get_current_user_id),
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouritesCreated:
    """Create the caller's list for a year from the movies that exist."""

    try:
        favourites_id = await service.create(
            user_id=user_id, year=payload.year, movie_ids=payload.movie_ids
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return FavouritesCreated(id=favourites_id)


@router.put("", response_model=FavouritesView)
async def update_favourites(
    payload: FavouritesUpdate,
    user_id: int = Depends(get_current_user_id),
    service: FavouritesService = Depends(get_favourites_service),
) -> FavouritesView:
    """Replace the movie set of one of the caller's lists."""

    try:
        return await service.update(
            user_id=user_id,
            favourites_id=payload.id,
            movie_ids=payload.movie_ids,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{favourites_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_favourites(
    favourites_id: int,
    user_id: int = Depends(get_current_user_id),
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    try:
        await service.delete_by_id(user_id=user_id, favourites_id=favourites_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/year/{year}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_favourites_for_year(
    year: int = Path(..., ge=FAVOURITES_MIN_YEAR, le=FAVOURITES_MAX_YEAR),
    user_id: int = Depends(get_current_user_id),
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    try:
        await service.delete_by_year(user_id=user_id, year=year)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
