"""FastAPI router for the movie catalog and per-movie comment threads."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from movie_catalog.schemas.comment import CommentPayload, CommentView
from movie_catalog.schemas.movie import (
    MovieCreate,
    MovieUpdate,
    MovieView,
    MovieWithComments,
)
from movie_catalog.services.dependencies import get_movie_service
from movie_catalog.services.errors import InvalidInputError, NotFoundError
from movie_catalog.services.identity import get_identity_claim
from movie_catalog.services.movie_service import MovieService

router = APIRouter()


@router.get("", response_model=list[MovieView])
async def list_movies(
    start_date: str | None = Query(
        None, description="ISO-8601 lower bound on added_at; defaults to 1888-01-01"
    ),
    end_date: str | None = Query(
        None, description="ISO-8601 upper bound on added_at; defaults to now"
    ),
    service: MovieService = Depends(get_movie_service),
) -> list[MovieView]:
    """List movies added within a window, ordered by release year descending."""

    try:
        return await service.list_movies(start_date=start_date, end_date=end_date)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/filter/{start_date}_{end_date}", response_model=list[MovieView])
async def filter_movies(
    start_date: str,
    end_date: str,
    service: MovieService = Depends(get_movie_service),
) -> list[MovieView]:
    """Path-style variant of the listing, e.g. ``/movies/filter/2011-02-10_2022-01-01``."""

    try:
        return await service.list_movies(start_date=start_date, end_date=end_date)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/{movie_id}", response_model=MovieView)
async def get_movie(
    movie_id: int,
    service: MovieService = Depends(get_movie_service),
) -> MovieView:
    try:
        return await service.get_movie(movie_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/{movie_id}/comments", response_model=MovieWithComments)
async def get_movie_comments(
    movie_id: int,
    service: MovieService = Depends(get_movie_service),
) -> MovieWithComments:
    """Return the movie together with all of its comments."""

    try:
        return await service.get_movie_with_comments(movie_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post(
    "",
    response_model=MovieView,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_identity_claim)],
)
async def create_movie(
    payload: MovieCreate,
    response: Response,
    service: MovieService = Depends(get_movie_service),
) -> MovieView:
    movie = await service.create_movie(payload)
    response.headers["Location"] = f"/movies/{movie.id}"
    return movie


@router.put(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_identity_claim)],
)
async def update_movie(
    movie_id: int,
    payload: MovieUpdate,
    service: MovieService = Depends(get_movie_service),
) -> Response:
    try:
        await service.update_movie(movie_id, payload)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_identity_claim)],
)
async def delete_movie(
    movie_id: int,
    service: MovieService = Depends(get_movie_service),
) -> Response:
    try:
        await service.delete_movie(movie_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{movie_id}/comments", response_model=CommentView)
async def add_comment(
    movie_id: int,
    payload: CommentPayload,
    service: MovieService = Depends(get_movie_service),
) -> CommentView:
    try:
        return await service.add_comment(movie_id, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.put(
    "/{movie_id}/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def update_comment(
    movie_id: int,
    comment_id: int,
    payload: CommentPayload,
    service: MovieService = Depends(get_movie_service),
) -> Response:
    try:
        await service.update_comment(movie_id, comment_id, payload)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{movie_id}/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_identity_claim)],
)
async def delete_comment(
    movie_id: int,
    comment_id: int,
    service: MovieService = Depends(get_movie_service),
) -> Response:
    try:
        await service.delete_comment(movie_id, comment_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
