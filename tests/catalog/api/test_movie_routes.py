"""HTTP-level tests for ``/movies`` and the nested comment routes."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from movie_catalog.settings import DEFAULT_IDENTITY_HEADER

AUTH = {DEFAULT_IDENTITY_HEADER: "alice"}

NEW_MOVIE = {
    "title": "Memento",
    "genre": "Thriller",
    "duration_minutes": 113,
    "release_year": 2000,
    "director": "Christopher Nolan",
    "rating": 8,
}


@pytest.mark.asyncio
async def test_list_movies(api_client: AsyncClient) -> None:
    response = await api_client.get("/movies")

    assert response.status_code == 200
    assert [movie["title"] for movie in response.json()] == ["Dune", "Arrival", "Heat"]


@pytest.mark.asyncio
async def test_list_movies_with_query_window(api_client: AsyncClient) -> None:
    response = await api_client.get(
        "/movies", params={"start_date": "2016-01-01", "end_date": "2022-01-01"}
    )

    assert [movie["title"] for movie in response.json()] == ["Dune", "Arrival"]


@pytest.mark.asyncio
async def test_filter_route_uses_path_window(api_client: AsyncClient) -> None:
    response = await api_client.get("/movies/filter/2011-02-10_2016-01-01")

    assert response.status_code == 200
    assert [movie["title"] for movie in response.json()] == ["Heat"]


@pytest.mark.asyncio
async def test_list_movies_rejects_bad_date(api_client: AsyncClient) -> None:
    response = await api_client.get("/movies", params={"start_date": "soon"})

    assert response.status_code == 400
    assert response.json()["error_type"] == "invalid_input"


@pytest.mark.asyncio
async def test_get_movie_and_missing_movie(api_client: AsyncClient) -> None:
    found = await api_client.get("/movies/2")
    missing = await api_client.get("/movies/404")

    assert found.status_code == 200
    assert found.json()["title"] == "Heat"
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_create_movie_requires_identity(api_client: AsyncClient) -> None:
    response = await api_client.post("/movies", json=NEW_MOVIE)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_movie_sets_location(api_client: AsyncClient) -> None:
    response = await api_client.post("/movies", json=NEW_MOVIE, headers=AUTH)

    assert response.status_code == 201
    created = response.json()
    assert response.headers["location"] == f"/movies/{created['id']}"
    assert created["watched"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("rating", [0, 11])
async def test_create_movie_validates_rating(api_client: AsyncClient, rating: int) -> None:
    response = await api_client.post(
        "/movies", json={**NEW_MOVIE, "rating": rating}, headers=AUTH
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_movie(api_client: AsyncClient) -> None:
    payload = {**NEW_MOVIE, "id": 2, "title": "Heat (Director's Cut)"}

    mismatched = await api_client.put("/movies/3", json=payload, headers=AUTH)
    response = await api_client.put("/movies/2", json=payload, headers=AUTH)

    assert mismatched.status_code == 400
    assert response.status_code == 204
    assert (await api_client.get("/movies/2")).json()["title"] == "Heat (Director's Cut)"


@pytest.mark.asyncio
async def test_delete_movie(api_client: AsyncClient) -> None:
    unauthenticated = await api_client.delete("/movies/3")
    response = await api_client.delete("/movies/3", headers=AUTH)

    assert unauthenticated.status_code == 401
    assert response.status_code == 204
    assert (await api_client.get("/movies/3")).status_code == 404
    assert (await api_client.delete("/movies/3", headers=AUTH)).status_code == 404


@pytest.mark.asyncio
async def test_comment_lifecycle(api_client: AsyncClient) -> None:
    created = await api_client.post(
        "/movies/2/comments", json={"text": "Best shootout ever filmed."}
    )
    assert created.status_code == 200
    comment = created.json()
    assert comment["movie_id"] == 2

    thread = await api_client.get("/movies/2/comments")
    assert [item["text"] for item in thread.json()["comments"]] == [
        "Best shootout ever filmed."
    ]

    updated = await api_client.put(
        f"/movies/2/comments/{comment['id']}",
        json={
            "id": comment["id"],
            "movie_id": 2,
            "text": "Best shootout ever filmed, hands down.",
            "important": True,
        },
    )
    assert updated.status_code == 204

    moved = await api_client.put(
        f"/movies/2/comments/{comment['id']}",
        json={"id": comment["id"], "movie_id": 1, "text": "Trying to move this one."},
    )
    assert moved.status_code == 400

    unauthenticated = await api_client.delete(f"/movies/2/comments/{comment['id']}")
    assert unauthenticated.status_code == 401

    deleted = await api_client.delete(
        f"/movies/2/comments/{comment['id']}", headers=AUTH
    )
    assert deleted.status_code == 204
    assert (await api_client.get("/movies/2/comments")).json()["comments"] == []


@pytest.mark.asyncio
async def test_short_comment_is_rejected(api_client: AsyncClient) -> None:
    response = await api_client.post("/movies/1/comments", json={"text": "meh"})

    assert response.status_code == 422
    assert response.json()["error_type"] == "validation_error"


@pytest.mark.asyncio
async def test_health_carries_request_id(api_client: AsyncClient) -> None:
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["x-request-id"]
