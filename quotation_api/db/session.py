"""
Async SQLAlchemy engine & session factory, plus the reconnect policy.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from quotation_api.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

engine_args = {
    "echo": False,
    "pool_pre_ping": True,
}

if "postgresql" in settings.DATABASE_URL:
    engine_args.update(
        {
            "pool_size": 20,
            "max_overflow": 10,
            "pool_recycle": 300,
        }
    )

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_args,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def run_with_reconnect(
    session: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int | None = None,
    backoff_seconds: float | None = None,
) -> T:
    """Run *operation*, retrying with exponential backoff when the connection drops.

    Only errors flagged ``connection_invalidated`` are retried; the session
    is rolled back before each new attempt so the pool hands out a fresh
    connection.  Every other database error propagates immediately.
    """
    attempts = attempts or settings.DB_RECONNECT_ATTEMPTS
    if backoff_seconds is None:
        backoff_seconds = settings.DB_RECONNECT_BACKOFF_SECONDS

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except DBAPIError as exc:
            if not exc.connection_invalidated or attempt == attempts:
                raise
            logger.warning(
                "Database connection lost (attempt %d/%d), reconnecting: %s",
                attempt,
                attempts,
                exc.orig,
            )
            await session.rollback()
            await asyncio.sleep(backoff_seconds * 2 ** (attempt - 1))

    raise RuntimeError("unreachable")  # pragma: no cover
