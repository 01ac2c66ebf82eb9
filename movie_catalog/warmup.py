"""Startup warmup so the first catalog request does not pay connection costs."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncEngine

from movie_catalog.db.connection import begin_engine_transaction

logger = logging.getLogger(__name__)


async def warmup_database(
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Open a pooled transaction and issue ``SELECT 1``.

    Failures are logged rather than raised so that a database which comes up a
    little after the API still lets the process start; requests will surface the
    real error through the database exception handlers.
    """
    try:
        if resolve_engine is None:
            from movie_catalog.db.connection import get_engine as resolve_engine

        start = time.perf_counter()
        engine = resolve_engine()

        async with begin_engine_transaction(engine) as conn:
            await conn.execute(text("SELECT 1"))

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Database connection warmed up (%.0fms)", elapsed)
    except Exception as exc:
        logger.warning("Database warmup failed: %s", exc)


async def warmup_catalog_query(
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Run one movie lookup so the ORM mappers configure before traffic arrives."""
    from movie_catalog.db.models import Movie

    try:
        if resolve_engine is None:
            from movie_catalog.db.connection import get_engine as resolve_engine

        start = time.perf_counter()
        async with begin_engine_transaction(resolve_engine()) as conn:
            await conn.execute(select(Movie.id).limit(1))

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Catalog query warmup executed (%.0fms)", elapsed)
    except Exception as exc:
        logger.warning("Catalog query warmup failed: %s", exc)


async def warmup_all(
    resolve_engine: Callable[[], AsyncEngine] | None = None,
) -> None:
    """Run every warmup step in sequence and log the total time."""
    start = time.perf_counter()

    await warmup_database(resolve_engine=resolve_engine)
    await warmup_catalog_query(resolve_engine=resolve_engine)

    total_elapsed = (time.perf_counter() - start) * 1000
    logger.info("Backend warmup complete (%.0fms)", total_elapsed)
