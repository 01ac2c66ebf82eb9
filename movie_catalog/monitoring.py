"""Slow query logging for the movie catalog database engine."""

import logging
import time
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import Pool

logger = logging.getLogger(__name__)

_STATEMENT_LOG_LIMIT = 500


def _truncate_statement(statement: str) -> str:
    """Clip long SQL so warnings stay on a single readable line."""
    if len(statement) <= _STATEMENT_LOG_LIMIT:
        return statement
    return statement[:_STATEMENT_LOG_LIMIT] + "..."


def setup_query_monitoring(
    engine: AsyncEngine,
    slow_query_threshold: float = 0.1,
    log_pool_stats: bool = True,
) -> None:
    """Attach cursor listeners that warn about statements slower than the threshold.

    Args:
        engine: Async engine whose ``sync_engine`` receives the listeners
        slow_query_threshold: Log queries slower than this many seconds
        log_pool_stats: Also log pool connect events at DEBUG level
    """
    if not hasattr(engine, "sync_engine"):
        logger.warning("Engine does not have sync_engine attribute, skipping query monitoring")
        return

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def receive_before_cursor_execute(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        """Record query start time."""
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def receive_after_cursor_execute(
        conn: Any,
        cursor: Any,
        statement: str,
        parameters: Any,
        context: Any,
        executemany: bool,
    ) -> None:
        """Log slow queries after execution."""
        total = time.perf_counter() - conn.info["query_start_time"].pop()

        if total > slow_query_threshold:
            logger.warning(
                "Slow query detected (%.3fs): %s",
                total,
                _truncate_statement(statement),
                extra={
                    "duration_seconds": total,
                    "threshold_seconds": slow_query_threshold,
                },
            )

    if log_pool_stats:

        @event.listens_for(Pool, "connect")
        def receive_connect(dbapi_conn: Any, connection_record: Any) -> None:
            """Log when new connections are created."""
            logger.debug("New database connection created")

    logger.info(
        "Query performance monitoring enabled (slow query threshold: %ss)",
        slow_query_threshold,
    )
