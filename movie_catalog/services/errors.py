"""Typed failures raised by the catalog services.

Each class extends the builtin exception the routers already know how to map,
mirroring how the API layer treats ``LookupError`` as 404 and ``ValueError`` as
400.  Callers that only care about the category can keep catching the builtin.
"""

from __future__ import annotations


class UnauthenticatedError(PermissionError):
    """The request carried no usable identity claim."""


class InvalidInputError(ValueError):
    """The request is well-formed but cannot be applied to the current state."""


class FavouritesConflictError(InvalidInputError):
    """A favourites list already exists for the requested user and year."""

    def __init__(self, year: int) -> None:
        super().__init__(f"Favourites for year {year} already exist")
        self.year = year


class NotFoundError(LookupError):
    """The requested entity does not exist or is not visible to the caller."""


class UserNotFoundError(NotFoundError):
    """The identity claim does not match any registered user."""

    def __init__(self, username: str) -> None:
        super().__init__(f"User '{username}' not found")
        self.username = username


__all__ = [
    "FavouritesConflictError",
    "InvalidInputError",
    "NotFoundError",
    "UnauthenticatedError",
    "UserNotFoundError",
]
