from __future__ import annotations

import logging
from typing import Any, AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Declarative Base
# -----------------------------------------------------------------------------
class Base(DeclarativeBase):
    pass


# -----------------------------------------------------------------------------
# Engine / session factories
# -----------------------------------------------------------------------------
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False, **engine_kwargs: Any) -> AsyncEngine:
    """
    Create the async engine for a database URL.

    SQLite connections get foreign keys switched on; address ownership and
    user deletion cascades rely on them.
    """
    engine = create_async_engine(url, echo=echo, future=True, **engine_kwargs)

    if make_url(url).get_backend_name() == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # objects stay readable after commit for response assembly
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
AsyncSessionLocal = build_session_factory(engine)


# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request, rolled back if the request fails."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# -----------------------------------------------------------------------------
# Lifecycle Utilities
# -----------------------------------------------------------------------------
async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create missing tables (development and tests)."""
    # Register every table on Base.metadata
    import models.user, models.profile, models.address  # noqa: F401

    bind = bind or engine
    try:
        async with bind.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.warning("Could not create tables: %s", e)
        return

    logger.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database engine disposed")
