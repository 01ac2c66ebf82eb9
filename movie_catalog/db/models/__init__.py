from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


class Movie(Base):
    __tablename__ = "movies"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 10", name="ck_movies_rating_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    genre: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    release_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        doc="Indexed for the descending release-year ordering used by listings",
    )
    director: Mapped[str | None] = mapped_column(String(255), nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
        doc="When the movie entered the catalog; drives the date-range filters",
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    watched: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )

    # Relationships
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="movie",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )
    favourites: Mapped[list["Favourites"]] = relationship(
        "Favourites",
        secondary="favourites_movies",
        back_populates="movies",
    )


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    important: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="0"
    )
    movie_id: Mapped[int] = mapped_column(
        ForeignKey("movies.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    movie: Mapped[Movie] = relationship("Movie", back_populates="comments")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
        doc=(
            "Identity claim forwarded by the authentication gateway. Lookups"
            " from request headers resolve against this column."
        ),
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)


# Imported late to avoid circular dependency with favourites module.
from .favourites import Favourites, favourites_movies  # noqa: E402

__all__ = [
    "Base",
    "Comment",
    "Favourites",
    "Movie",
    "User",
    "favourites_movies",
    "utcnow",
]
