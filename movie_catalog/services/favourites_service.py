"""Business rules for per-user, per-year favourites lists.

Rules enforced here:
* A user owns at most one list per year.  Creation checks first and the
  ``uq_favourites_user_year`` constraint catches requests that race past the
  check; both surface as :class:`FavouritesConflictError`.
* Creation drops movie ids that are not in the catalog but refuses to store a
  list with no movies left.  Updates replace the movie set wholesale and accept
  an empty result.
* Every lookup filters on the owning user.  A list owned by someone else is
  indistinguishable from a missing one: updates report
  :class:`InvalidInputError` (HTTP 400) while deletes report
  :class:`NotFoundError` (HTTP 404), matching the published API contract.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from movie_catalog.db.models import Favourites, User
from movie_catalog.db.repositories import (
    FavouritesRepository,
    MovieRepository,
    UserRepository,
)
from movie_catalog.schemas.favourites import FavouritesView
from movie_catalog.services.errors import (
    FavouritesConflictError,
    InvalidInputError,
    NotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def project_favourites(favourites: Favourites) -> FavouritesView:
    """Convert an ORM favourites row (movies and user loaded) into its view."""

    return FavouritesView.model_validate(favourites)


class FavouritesService:
    """Coordinates the repositories behind the ``/favourites`` endpoints."""

    def __init__(
        self,
        *,
        favourites: FavouritesRepository,
        movies: MovieRepository,
        users: UserRepository,
    ) -> None:
        self._favourites = favourites
        self._movies = movies
        self._users = users

    async def resolve_user(self, username: str) -> User:
        """Map an identity claim onto a registered user or raise ``UserNotFoundError``."""

        user = await self._users.find_user(username)
        if user is None:
            logger.warning("Identity claim %r does not match a known user", username)
            raise UserNotFoundError(username)
        return user

    async def list_all(self, *, user_id: int) -> list[FavouritesView]:
        favourites = await self._favourites.list_for_user(user_id=user_id)
        return [project_favourites(item) for item in favourites]

    async def create(
        self, *, user_id: int, year: int, movie_ids: Iterable[int]
    ) -> int:
        """Create the user's list for ``year`` and return its identifier."""

        existing = await self._favourites.find_for_user_year(user_id=user_id, year=year)
        if existing is not None:
            logger.warning("User %s already has favourites for %s", user_id, year)
            raise FavouritesConflictError(year)

        movies = await self._movies.find_movies_by_ids(movie_ids)
        if not movies:
            logger.warning(
                "Rejected favourites for user %s, year %s: no known movies", user_id, year
            )
            raise InvalidInputError(
                "None of the supplied movie ids match a movie in the catalog"
            )

        favourites = Favourites(user_id=user_id, year=year, movies=movies)
        await self._favourites.insert(favourites)
        try:
            await self._favourites.commit()
        except IntegrityError:
            await self._favourites.rollback()
            if await self._favourites.find_for_user_year(user_id=user_id, year=year):
                logger.warning(
                    "Concurrent favourites create for user %s, year %s", user_id, year
                )
                raise FavouritesConflictError(year) from None
            raise

        logger.info(
            "Created favourites %s for user %s, year %s with %s movies",
            favourites.id,
            user_id,
            year,
            len(movies),
        )
        return favourites.id

    async def update(
        self, *, user_id: int, favourites_id: int, movie_ids: Iterable[int]
    ) -> FavouritesView:
        """Replace the movie set of an owned list; unknown ids are dropped."""

        favourites = await self._favourites.find_owned(
            user_id=user_id, favourites_id=favourites_id
        )
        if favourites is None:
            logger.warning(
                "Rejected update of favourites %s by user %s: not owned or missing",
                favourites_id,
                user_id,
            )
            raise InvalidInputError(f"Favourites {favourites_id} not found for the user")

        movies = await self._movies.find_movies_by_ids(movie_ids)
        await self._favourites.replace_movies(favourites, movies)
        try:
            await self._favourites.commit()
        except (IntegrityError, StaleDataError):
            # Raised when the list is deleted after it was loaded: adding links
            # trips the foreign key, removing them matches no rows.
            await self._favourites.rollback()
            if not await self._favourites.exists(
                user_id=user_id, favourites_id=favourites_id
            ):
                raise InvalidInputError(
                    f"Favourites {favourites_id} not found for the user"
                ) from None
            raise

        logger.info(
            "Replaced movies of favourites %s for user %s (%s movies)",
            favourites_id,
            user_id,
            len(movies),
        )
        return project_favourites(favourites)

    async def delete_by_id(self, *, user_id: int, favourites_id: int) -> None:
        favourites = await self._favourites.find_owned(
            user_id=user_id, favourites_id=favourites_id
        )
        if favourites is None:
            raise NotFoundError(f"Favourites {favourites_id} not found")
        await self._delete(favourites, user_id=user_id)

    async def delete_by_year(self, *, user_id: int, year: int) -> None:
        favourites = await self._favourites.find_for_user_year(
            user_id=user_id, year=year
        )
        if favourites is None:
            raise NotFoundError(f"Favourites for year {year} not found")
        await self._delete(favourites, user_id=user_id)

    async def _delete(self, favourites: Favourites, *, user_id: int) -> None:
        favourites_id = favourites.id
        if not await self._favourites.delete(
            user_id=user_id, favourites_id=favourites_id
        ):
            await self._favourites.rollback()
            logger.warning(
                "Favourites %s for user %s vanished before delete", favourites_id, user_id
            )
            raise NotFoundError(f"Favourites {favourites_id} not found")
        await self._favourites.commit()

        logger.info("Deleted favourites %s for user %s", favourites_id, user_id)
