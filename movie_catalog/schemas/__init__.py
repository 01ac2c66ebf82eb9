"""Pydantic schemas for API requests and responses."""

from movie_catalog.schemas.comment import CommentPayload, CommentView  # noqa: F401
from movie_catalog.schemas.favourites import (  # noqa: F401
    FavouritesCreate,
    FavouritesCreated,
    FavouritesUpdate,
    FavouritesView,
)
from movie_catalog.schemas.movie import (  # noqa: F401
    MovieCreate,
    MovieUpdate,
    MovieView,
    MovieWithComments,
)
from movie_catalog.schemas.user import UserView  # noqa: F401
