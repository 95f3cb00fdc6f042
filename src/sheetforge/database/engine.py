"""Engine and session handling for the sheetforge character store."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sheetforge.config import get_settings

from .models.base import Base

logger = structlog.get_logger(__name__)

_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def sqlite_file(database_url: str) -> Path | None:
    """Return the file behind a SQLite URL, or None for in-memory and other backends."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
        return None
    return Path(url.database)


def get_engine() -> AsyncEngine:
    """
    Return the shared engine for the configured database, creating it on first use.

    The parent directory of a SQLite database file is created if missing.
    """
    global _engine

    if _engine is None:
        settings = get_settings()
        db_file = sqlite_file(settings.database_url)
        if db_file is not None:
            db_file.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_async_engine(settings.database_url, echo=settings.debug)

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _async_session_factory

    if _async_session_factory is None:
        # Repositories return pydantic copies, but records stay readable after commit
        _async_session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _async_session_factory


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Open a session for one unit of work.

    Repository functions commit their own writes; anything left pending when
    the block exits is committed, and an exception rolls it back.

    Example:
        async with get_session() as session:
            sheet = await compute_stored_character(session, character_id)
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create the character and homebrew tables if they do not exist yet."""
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.debug(
        "database_initialized",
        url=engine.url.render_as_string(hide_password=True),
        tables=sorted(Base.metadata.tables),
    )


async def close_db() -> None:
    """Dispose of the engine; the next get_engine() call builds a new one."""
    await reset_engine()


async def reset_engine() -> None:
    """Drop the shared engine and session factory, disposing the engine if one exists."""
    global _engine, _async_session_factory

    engine, _engine, _async_session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
