"""Identity resolution for authenticated endpoints.

Authentication happens upstream: the gateway in front of the API verifies the
caller and forwards the username in the header named by
``AppSettings.identity_header``.  This module only reads that claim; it never
trusts anything else in the request to identify the caller.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import HTTPException, Request, status

from movie_catalog.services.errors import UnauthenticatedError
from movie_catalog.settings import get_settings


def resolve_identity_claim(headers: Mapping[str, str], header_name: str) -> str:
    """Return the trimmed identity claim or raise :class:`UnauthenticatedError`."""

    claim = (headers.get(header_name) or "").strip()
    if not claim:
        raise UnauthenticatedError(f"Missing identity header '{header_name}'")
    return claim


async def get_identity_claim(request: Request) -> str:
    """FastAPI dependency yielding the caller's username."""

    header_name = get_settings().identity_header
    try:
        return resolve_identity_claim(request.headers, header_name)
    except UnauthenticatedError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


__all__ = ["get_identity_claim", "resolve_identity_claim"]
