"""SQLAlchemy ORM models for per-user, per-year favourites lists.

A user keeps at most one favourites list for any given year.  The application
checks this before inserting, and the ``uq_favourites_user_year`` constraint
guarantees it when two requests race past that check.  Movies are referenced
through the ``favourites_movies`` association table and are never owned by a
list, so deleting a list leaves the catalog untouched.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Integer,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import Base, Movie, User

favourites_movies = Table(
    "favourites_movies",
    Base.metadata,
    Column(
        "favourites_id",
        ForeignKey("favourites.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "movie_id",
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


class Favourites(Base):
    """A user's list of favourite movies for a single year."""

    __tablename__ = "favourites"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "year",
            name="uq_favourites_user_year",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    user: Mapped[User] = relationship("User")
    movies: Mapped[list[Movie]] = relationship(
        "Movie",
        secondary=favourites_movies,
        back_populates="favourites",
        order_by="Movie.id",
    )
