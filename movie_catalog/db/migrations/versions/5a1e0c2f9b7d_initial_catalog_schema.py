"""initial catalog schema

Revision ID: 5a1e0c2f9b7d
Revises:
Create Date: 2025-11-10 09:00:00.000000
"""

from __future__ import annotations

from typing import Sequence

from alembic import op
import sqlalchemy as sa

revision: str = "5a1e0c2f9b7d"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("genre", sa.String(length=50), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("release_year", sa.Integer(), nullable=False),
        sa.Column("director", sa.String(length=255), nullable=True),
        sa.Column(
            "added_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column(
            "watched",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 10", name="ck_movies_rating_range"),
    )
    op.create_index("ix_movies_title", "movies", ["title"])
    op.create_index("ix_movies_genre", "movies", ["genre"])
    op.create_index("ix_movies_release_year", "movies", ["release_year"])
    op.create_index("ix_movies_added_at", "movies", ["added_at"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column(
            "important",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("movie_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["movie_id"], ["movies.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_comments_movie_id", "comments", ["movie_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "favourites",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "year", name="uq_favourites_user_year"),
    )
    op.create_index("ix_favourites_user_id", "favourites", ["user_id"])

    op.create_table(
        "favourites_movies",
        sa.Column("favourites_id", sa.Integer(), nullable=False),
        sa.Column("movie_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["favourites_id"], ["favourites.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["movie_id"], ["movies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("favourites_id", "movie_id"),
    )
    op.create_index(
        "ix_favourites_movies_movie_id", "favourites_movies", ["movie_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_favourites_movies_movie_id", table_name="favourites_movies")
    op.drop_table("favourites_movies")

    op.drop_index("ix_favourites_user_id", table_name="favourites")
    op.drop_table("favourites")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")

    op.drop_index("ix_comments_movie_id", table_name="comments")
    op.drop_table("comments")

    op.drop_index("ix_movies_added_at", table_name="movies")
    op.drop_index("ix_movies_release_year", table_name="movies")
    op.drop_index("ix_movies_genre", table_name="movies")
    op.drop_index("ix_movies_title", table_name="movies")
    op.drop_table("movies")
