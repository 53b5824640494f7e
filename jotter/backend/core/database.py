"""
Database Engine and Sessions.

The engine is created on first use so importing the app never touches
config/.env. PostgreSQL (asyncpg) is the deployment target; SQLite
(aiosqlite) works for local runs and tests through DATABASE_URL.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jotter.backend.core.config_schema import DatabaseSchema
from jotter.backend.core.logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection.

    Bookmarks rely on ON DELETE CASCADE when an entry is deleted permanently.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def engine_options(url: str, db_config: DatabaseSchema) -> dict[str, Any]:
    """Keyword arguments for create_async_engine. SQLite takes no pool sizing."""
    options: dict[str, Any] = {"echo": db_config.echo}
    if not is_sqlite_url(url):
        options.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
            pool_pre_ping=True,
        )
    return options


def _create_engine() -> AsyncEngine:
    from jotter.backend.core.config import get_app_config, get_database_url

    url = get_database_url()
    db_config = get_app_config().database

    engine = create_async_engine(url, **engine_options(url, db_config))
    if is_sqlite_url(url):
        enable_sqlite_foreign_keys(engine)

    logger.debug(
        "Database engine created",
        extra={"dialect": engine.dialect.name, "database": engine.url.database},
    )
    return engine


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the shared engine. Used by the API and the CLI."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Commits when the handler returns and rolls back if it raises, so a
    failed request never leaves partial writes (a share token allocated
    for an entry whose update then failed, for instance).
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
