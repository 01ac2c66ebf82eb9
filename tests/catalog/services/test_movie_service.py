"""Tests for catalog listing, movie CRUD and comment threads."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.db.models import Comment, favourites_movies
from movie_catalog.schemas.comment import CommentPayload
from movie_catalog.schemas.movie import MovieCreate, MovieUpdate
from movie_catalog.services.errors import InvalidInputError, NotFoundError
from movie_catalog.services.movie_service import EARLIEST_ADDED_AT, parse_boundary


def _update_payload(movie_id: int, **overrides) -> MovieUpdate:
    values = {
        "id": movie_id,
        "title": "Arrival",
        "genre": "Drama",
        "duration_minutes": 116,
        "release_year": 2016,
        "director": "Denis Villeneuve",
        "rating": 8,
        "watched": False,
    }
    values.update(overrides)
    return MovieUpdate(**values)


def test_parse_boundary_defaults_when_blank() -> None:
    assert parse_boundary(None, default=EARLIEST_ADDED_AT) == EARLIEST_ADDED_AT
    assert parse_boundary("  ", default=EARLIEST_ADDED_AT) == EARLIEST_ADDED_AT


def test_parse_boundary_normalises_to_utc() -> None:
    assert parse_boundary("2020-01-01", default=EARLIEST_ADDED_AT) == datetime(
        2020, 1, 1, tzinfo=UTC
    )
    shifted = parse_boundary("2020-01-01T02:00:00+02:00", default=EARLIEST_ADDED_AT)
    assert shifted == datetime(2020, 1, 1, tzinfo=UTC)
    assert shifted.utcoffset() == timedelta(0)


def test_parse_boundary_rejects_garbage() -> None:
    with pytest.raises(InvalidInputError):
        parse_boundary("last tuesday", default=EARLIEST_ADDED_AT)


@pytest.mark.asyncio
async def test_list_movies_orders_by_release_year(movie_service, catalog) -> None:
    movies = await movie_service.list_movies()

    assert [movie.title for movie in movies] == ["Dune", "Arrival", "Heat"]


@pytest.mark.asyncio
async def test_list_movies_filters_on_added_at(movie_service, catalog) -> None:
    movies = await movie_service.list_movies(
        start_date="2015-01-01", end_date="2020-12-31"
    )

    assert [movie.title for movie in movies] == ["Arrival"]


@pytest.mark.asyncio
async def test_list_movies_rejects_unparseable_dates(movie_service, catalog) -> None:
    with pytest.raises(InvalidInputError):
        await movie_service.list_movies(start_date="yesterday")


@pytest.mark.asyncio
async def test_get_movie_missing_raises(movie_service, catalog) -> None:
    with pytest.raises(NotFoundError):
        await movie_service.get_movie(404)


@pytest.mark.asyncio
async def test_create_movie_defaults_added_at(movie_service, catalog) -> None:
    before = datetime.now(UTC)
    created = await movie_service.create_movie(
        MovieCreate(title="Memento", release_year=2000, rating=8)
    )

    assert created.id is not None
    assert created.added_at >= before
    assert (await movie_service.get_movie(created.id)).title == "Memento"


@pytest.mark.asyncio
async def test_create_movie_converts_added_at_to_utc(movie_service, catalog) -> None:
    local = datetime(2019, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5)))
    created = await movie_service.create_movie(
        MovieCreate(title="Parasite", release_year=2019, rating=9, added_at=local)
    )

    assert created.added_at == datetime(2019, 5, 1, 17, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_update_movie_overwrites_fields(movie_service, catalog) -> None:
    await movie_service.update_movie(1, _update_payload(1, rating=10, watched=True))

    movie = await movie_service.get_movie(1)
    assert movie.rating == 10
    assert movie.watched is True


@pytest.mark.asyncio
async def test_update_movie_rejects_mismatched_id(movie_service, catalog) -> None:
    with pytest.raises(InvalidInputError):
        await movie_service.update_movie(1, _update_payload(2))


@pytest.mark.asyncio
async def test_update_missing_movie_is_not_found(movie_service, catalog) -> None:
    with pytest.raises(NotFoundError):
        await movie_service.update_movie(404, _update_payload(404))


@pytest.mark.asyncio
async def test_delete_movie_drops_comments_and_favourite_links(
    movie_service, favourites_service, session: AsyncSession, catalog
) -> None:
    alice = catalog["alice"]
    await favourites_service.create(user_id=alice.id, year=2020, movie_ids=[1, 2])

    await movie_service.delete_movie(1)

    with pytest.raises(NotFoundError):
        await movie_service.get_movie(1)
    comments = await session.scalar(select(func.count()).select_from(Comment))
    assert comments == 0
    links = await session.scalar(select(func.count()).select_from(favourites_movies))
    assert links == 1
    [remaining] = await favourites_service.list_all(user_id=alice.id)
    assert [movie.id for movie in remaining.movies] == [2]


@pytest.mark.asyncio
async def test_delete_missing_movie_is_not_found(movie_service, catalog) -> None:
    with pytest.raises(NotFoundError):
        await movie_service.delete_movie(404)


@pytest.mark.asyncio
async def test_add_comment_attaches_to_movie(movie_service, catalog) -> None:
    comment = await movie_service.add_comment(
        2, CommentPayload(text="The diner scene holds up.", important=True)
    )

    assert comment.movie_id == 2
    detail = await movie_service.get_movie_with_comments(2)
    assert [item.text for item in detail.comments] == ["The diner scene holds up."]
    assert detail.comments[0].important is True


@pytest.mark.asyncio
async def test_add_comment_to_missing_movie(movie_service, catalog) -> None:
    with pytest.raises(NotFoundError):
        await movie_service.add_comment(404, CommentPayload(text="Nothing to see here."))


@pytest.mark.asyncio
async def test_update_comment_replaces_text(movie_service, catalog) -> None:
    [existing] = (await movie_service.get_movie_with_comments(1)).comments

    await movie_service.update_comment(
        1,
        existing.id,
        CommentPayload(
            id=existing.id, text="Rewatched, still great.", movie_id=1, important=True
        ),
    )

    [updated] = (await movie_service.get_movie_with_comments(1)).comments
    assert updated.text == "Rewatched, still great."
    assert updated.important is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("comment_id", "body_id", "body_movie_id"),
    [
        (1, 2, 1),
        (1, 1, None),
        (1, 1, 2),
    ],
)
async def test_update_comment_rejects_inconsistent_payload(
    movie_service, catalog, comment_id, body_id, body_movie_id
) -> None:
    payload = CommentPayload(
        id=body_id, text="A perfectly long comment.", movie_id=body_movie_id
    )

    with pytest.raises(InvalidInputError):
        await movie_service.update_comment(1, comment_id, payload)


@pytest.mark.asyncio
async def test_comment_lookups_are_scoped_to_movie(movie_service, catalog) -> None:
    [existing] = (await movie_service.get_movie_with_comments(1)).comments

    with pytest.raises(NotFoundError):
        await movie_service.delete_comment(2, existing.id)
    with pytest.raises(NotFoundError):
        await movie_service.update_comment(
            2,
            existing.id,
            CommentPayload(id=existing.id, text="Moved to another film.", movie_id=2),
        )


@pytest.mark.asyncio
async def test_delete_comment(movie_service, catalog) -> None:
    [existing] = (await movie_service.get_movie_with_comments(1)).comments

    await movie_service.delete_comment(1, existing.id)

    assert (await movie_service.get_movie_with_comments(1)).comments == []
