#!/usr/bin/env python
"""Seed movies and users into the catalog database from a JSONL file.

Each line is a JSON object with a ``kind`` of ``movie`` or ``user``::

    {"kind": "movie", "id": 1, "title": "Heat", "release_year": 1995, "rating": 9}
    {"kind": "user", "username": "alice", "email": "alice@example.com"}

Users must exist before they can keep favourites, because identities forwarded
by the gateway are only resolved, never created, by the API.

Usage:
    python -m movie_catalog.scripts.seed_catalog ./data/fixtures/catalog.jsonl
    python -m movie_catalog.scripts.seed_catalog ./data/fixtures/catalog.jsonl --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from movie_catalog.db.connection import get_session
from movie_catalog.db.models import Movie, User
from movie_catalog.db.repositories import UserRepository
from movie_catalog.main import validate_environment
from movie_catalog.schemas.movie import MovieCreate

logger = logging.getLogger(__name__)

BATCH_SIZE = 100


def build_movie(data: dict[str, Any]) -> Movie:
    """Validate a movie record through the API schema and build the ORM row."""

    payload = MovieCreate.model_validate(data)
    values = payload.model_dump()
    values["added_at"] = payload.added_at or datetime.now(UTC)
    movie = Movie(**values)
    if data.get("id") is not None:
        movie.id = int(data["id"])
    return movie


MOVIE_ID_SEQUENCE_SQL = text(
    "SELECT setval(pg_get_serial_sequence('movies', 'id'),"
    " (SELECT COALESCE(MAX(id), 1) FROM movies))"
)


async def sync_movie_id_sequence(session: AsyncSession) -> bool:
    """Move the PostgreSQL ``movies.id`` sequence past ids inserted explicitly.

    SQLite derives the next rowid from the table, so only PostgreSQL needs it.
    """

    if session.bind.dialect.name != "postgresql":
        return False
    await session.execute(MOVIE_ID_SEQUENCE_SQL)
    return True


async def _seed_user(session: AsyncSession, data: dict[str, Any]) -> bool:
    """Insert the user unless the username is already registered."""

    username = (data.get("username") or "").strip()
    if not username:
        raise ValueError("Missing username")
    users = UserRepository(session)
    if await users.find_user(username) is not None:
        return False
    await users.add(User(username=username, email=data.get("email")))
    return True


async def seed_catalog(
    jsonl_path: Path,
    *,
    dry_run: bool = False,
    engine: AsyncEngine | None = None,
) -> tuple[int, int]:
    """Load movies and users from ``jsonl_path``.

    ``engine`` defaults to the shared application engine.

    Returns:
        Tuple of (loaded_count, skipped_count)
    """
    if not jsonl_path.exists():
        logger.error("File not found: %s", jsonl_path)
        return 0, 0

    loaded_count = 0
    skipped_count = 0
    explicit_ids = False

    async with get_session(engine) as session:
        with open(jsonl_path, encoding="utf-8") as handle:
            for line_num, line in enumerate(handle, 1):
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                    kind = data.pop("kind", "movie")

                    if kind == "movie":
                        movie = build_movie(data)
                        if not dry_run:
                            await session.merge(movie)
                            explicit_ids = explicit_ids or movie.id is not None
                    elif kind == "user":
                        if not dry_run and not await _seed_user(session, data):
                            logger.info("Line %s: user already exists, skipping", line_num)
                            skipped_count += 1
                            continue
                    else:
                        logger.warning("Line %s: unknown kind %r, skipping", line_num, kind)
                        skipped_count += 1
                        continue

                    loaded_count += 1
                    if not dry_run and loaded_count % BATCH_SIZE == 0:
                        await session.commit()
                        logger.info("Committed %s records", loaded_count)

                except json.JSONDecodeError as exc:
                    logger.error("Line %s: invalid JSON: %s", line_num, exc)
                    skipped_count += 1
                except (ValidationError, ValueError) as exc:
                    logger.error("Line %s: invalid record: %s", line_num, exc)
                    skipped_count += 1

        if explicit_ids and await sync_movie_id_sequence(session):
            logger.info("Advanced the movies id sequence past seeded ids")
        if not dry_run and session.in_transaction():
            await session.commit()

    return loaded_count, skipped_count


async def main() -> int:
    """CLI entry point."""
    validate_environment()

    parser = argparse.ArgumentParser(description="Seed movies and users into the catalog")
    parser.add_argument(
        "jsonl_path",
        nargs="?",
        type=Path,
        default=Path("./data/fixtures/catalog.jsonl"),
        help="Path to JSONL file (default: ./data/fixtures/catalog.jsonl)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate data without inserting into database",
    )
    args = parser.parse_args()

    loaded, skipped = await seed_catalog(args.jsonl_path, dry_run=args.dry_run)

    verb = "Validated" if args.dry_run else "Loaded"
    logger.info("%s %s records, skipped %s", verb, loaded, skipped)
    return 0 if skipped == 0 else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
