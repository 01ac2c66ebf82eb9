from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from movie_catalog.schemas.comment import CommentView

MIN_RATING = 1
MAX_RATING = 10


class MovieBase(BaseModel):
    """Fields shared by every movie payload."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    genre: str | None = Field(None, max_length=50, description="e.g. Comedy, Drama")
    duration_minutes: int | None = Field(None, ge=1)
    release_year: int = Field(..., ge=1888, description="Year the movie premiered")
    director: str | None = Field(None, max_length=255)
    added_at: datetime | None = Field(
        None, description="When the movie entered the catalog; defaults to now"
    )
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    watched: bool = False


class MovieCreate(MovieBase):
    """Payload for ``POST /movies``."""


class MovieUpdate(MovieBase):
    """Full replacement payload for ``PUT /movies/{id}``; ``id`` must match the path."""

    id: int


class MovieView(MovieBase):
    """Movie as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    added_at: datetime


class MovieWithComments(MovieView):
    """Movie detail including its comment thread."""

    comments: list[CommentView] = Field(default_factory=list)
