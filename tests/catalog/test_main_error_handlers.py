"""Tests asserting ``movie_catalog.main`` exception handlers render the shared shape."""

from __future__ import annotations

import json

import pytest
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DBAPIError, IntegrityError

import movie_catalog.main as catalog_main
from movie_catalog.utils.request_context import clear_request_id, set_request_id


def _build_request(path: str = "/resource") -> Request:
    return Request({"type": "http", "method": "GET", "path": path, "headers": []})


@pytest.mark.asyncio
async def test_http_exception_maps_status_to_error_type() -> None:
    token = set_request_id("req-1")
    try:
        response = await catalog_main.http_exception_handler(
            _build_request("/favourites"),
            HTTPException(status_code=404, detail="User 'mallory' not found"),
        )
    finally:
        clear_request_id(token)

    body = json.loads(response.body.decode())
    assert response.status_code == 404
    assert body["error_type"] == "not_found"
    assert body["message"] == "User 'mallory' not found"
    assert body["request_id"] == "req-1"


@pytest.mark.asyncio
async def test_validation_exception_handler_lists_fields() -> None:
    exc = RequestValidationError(
        [{"loc": ("body", "year"), "msg": "Field required", "input": None}]
    )

    response = await catalog_main.validation_exception_handler(
        _build_request("/favourites"), exc
    )

    body = json.loads(response.body.decode())
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert body["errors"] == [
        {"field": "body.year", "message": "Field required", "value": None}
    ]


@pytest.mark.asyncio
async def test_database_connection_handler_sets_retry_after() -> None:
    exc = DBAPIError("statement", {}, Exception("boom"))

    response = await catalog_main.database_connection_exception_handler(
        _build_request("/movies"), exc
    )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.headers["retry-after"] == "5"


@pytest.mark.asyncio
async def test_integrity_error_is_conflict() -> None:
    exc = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    response = await catalog_main.database_integrity_exception_handler(
        _build_request("/favourites"), exc
    )

    body = json.loads(response.body.decode())
    assert response.status_code == status.HTTP_409_CONFLICT
    assert body["error_type"] == "conflict"


def test_sanitize_database_url_hides_password() -> None:
    assert (
        catalog_main._sanitize_database_url("postgresql+psycopg://app:secret@db/movies")
        == "postgresql+psycopg://app:***@db/movies"
    )
    assert (
        catalog_main._sanitize_database_url("sqlite+aiosqlite:///./data/app.db")
        == "sqlite+aiosqlite:///./data/app.db"
    )
