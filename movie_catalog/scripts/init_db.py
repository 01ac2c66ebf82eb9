#!/usr/bin/env python
"""Create every catalog table directly from the ORM metadata.

Handy for SQLite development databases; PostgreSQL deployments should run the
Alembic migrations instead so the schema history stays consistent.

Usage:
    python -m movie_catalog.scripts.init_db
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from movie_catalog.db.connection import create_engine, get_database_type
from movie_catalog.db.models import Base
from movie_catalog.main import validate_environment

logger = logging.getLogger(__name__)


async def init_db() -> None:
    if get_database_type() == "sqlite":
        Path("data").mkdir(exist_ok=True)
    engine = create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Database tables created successfully")


if __name__ == "__main__":
    validate_environment()
    asyncio.run(init_db())
