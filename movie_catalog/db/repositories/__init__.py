"""Repository layer that isolates SQLAlchemy queries from the services."""

from movie_catalog.db.repositories.base import BaseRepository
from movie_catalog.db.repositories.favourites_repository import FavouritesRepository
from movie_catalog.db.repositories.movie_repository import MovieRepository
from movie_catalog.db.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "FavouritesRepository",
    "MovieRepository",
    "UserRepository",
]
