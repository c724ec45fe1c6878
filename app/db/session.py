"""
Async SQLAlchemy engine & session factory (asyncpg driver).
"""

from __future__ import annotations

import asyncio
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.sql import Executable

from app.core.config import settings
from app.core.exceptions import DataAccessError

engine_args: dict[str, Any] = {
    "echo": False,
    "pool_pre_ping": True,
}

if "postgresql" in settings.DATABASE_URL:
    engine_args.update(
        {
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
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


def enable_sqlite_foreign_keys(sync_engine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""

    @event.listens_for(sync_engine, "connect")
    def _set_pragma(dbapi_connection, _record):  # pragma: no cover - driver hook
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine.sync_engine)


async def run_query(db: AsyncSession, statement: Executable) -> Result:
    """Execute a read under the configured deadline.

    Timeouts, pool checkout failures and driver errors all surface as
    ``DataAccessError``; nothing is retried.  Cancellation of the calling
    task propagates into the awaited statement.
    """
    try:
        return await asyncio.wait_for(
            db.execute(statement),
            timeout=settings.DB_QUERY_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError as exc:
        raise DataAccessError(
            f"query exceeded {settings.DB_QUERY_TIMEOUT_SECONDS}s deadline"
        ) from exc
    except SQLAlchemyError as exc:
        raise DataAccessError(str(exc)) from exc
