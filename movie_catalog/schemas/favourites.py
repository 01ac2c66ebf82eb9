"""Pydantic schemas that power the favourites API surface."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from movie_catalog.schemas.movie import MovieView
from movie_catalog.schemas.user import UserView


FAVOURITES_MIN_YEAR = 1888
FAVOURITES_MAX_YEAR = 9999


def _dedupe_ids(value: list[int]) -> list[int]:
    """Collapse repeated ids while keeping the caller's ordering."""

    return list(dict.fromkeys(value))


class FavouritesCreate(BaseModel):
    """Payload for creating the caller's favourites list for a year."""

    year: int = Field(..., ge=FAVOURITES_MIN_YEAR, le=FAVOURITES_MAX_YEAR)
    movie_ids: list[int] = Field(
        default_factory=list,
        description=(
            "Movies to include. Identifiers that do not match a catalog movie"
            " are ignored; at least one must match."
        ),
    )

    @field_validator("movie_ids")
    @classmethod
    def collapse_duplicate_ids(cls, value: list[int]) -> list[int]:
        return _dedupe_ids(value)


class FavouritesUpdate(BaseModel):
    """Payload that replaces the movie set of an existing favourites list."""

    id: int = Field(..., description="Identifier of the favourites list to replace")
    movie_ids: list[int] = Field(
        default_factory=list,
        description="Complete new movie set; an empty list clears the favourites.",
    )

    @field_validator("movie_ids")
    @classmethod
    def collapse_duplicate_ids(cls, value: list[int]) -> list[int]:
        return _dedupe_ids(value)


class FavouritesCreated(BaseModel):
    """Response returned after a favourites list is created."""

    id: int


class FavouritesView(BaseModel):
    """A favourites list projected for its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user: UserView
    movies: list[MovieView] = Field(default_factory=list)
    year: int
