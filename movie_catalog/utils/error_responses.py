"""Helper functions for constructing structured API error responses.

Every exception handler in :mod:`movie_catalog.main` funnels through these
builders so that a 400 from the favourites rules and a 503 from a dropped
database connection share one payload shape, stamped with the request ID and a
timezone-aware timestamp.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from fastapi import status
from fastapi.responses import JSONResponse

from movie_catalog.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from movie_catalog.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_validation_error_response",
    "error_type_for_status",
    "render_error",
]

_STATUS_ERROR_TYPES: dict[int, ErrorType] = {
    status.HTTP_400_BAD_REQUEST: ErrorType.INVALID_INPUT,
    status.HTTP_401_UNAUTHORIZED: ErrorType.AUTHENTICATION_ERROR,
    status.HTTP_404_NOT_FOUND: ErrorType.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorType.CONFLICT,
    status.HTTP_422_UNPROCESSABLE_ENTITY: ErrorType.VALIDATION_ERROR,
}


def _current_timestamp() -> datetime:
    """Return a timezone-aware timestamp for error payloads.

    Kept as a separate function so tests can monkeypatch the clock.
    """

    return datetime.now(UTC)


def error_type_for_status(status_code: int) -> ErrorType:
    """Map an HTTP status code onto the error taxonomy exposed to clients."""

    return _STATUS_ERROR_TYPES.get(status_code, ErrorType.INTERNAL_ERROR)


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    error_type: ErrorType = ErrorType.VALIDATION_ERROR,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    """Construct a ``ValidationErrorResponse`` enriched with metadata."""

    resolved_request_id = request_id or get_request_id()
    return ValidationErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=resolved_request_id,
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    detail: str | None,
    status_code: int,
    path: str,
    retry_after: int | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse`` enriched with metadata."""

    resolved_request_id = request_id or get_request_id()
    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=resolved_request_id,
        path=path,
        retry_after=retry_after,
    )


def render_error(
    error_response: ErrorResponse,
    *,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Serialise ``error_response`` into a ``JSONResponse`` with its status code."""

    if error_response.retry_after is not None:
        headers = {**(headers or {}), "Retry-After": str(error_response.retry_after)}
    return JSONResponse(
        status_code=error_response.status_code,
        content=error_response.model_dump(mode="json"),
        headers=headers,
    )
