"""Async engine and session factory shared by routes, services and scripts."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from llmstxt.core.config import get_settings


class Base(DeclarativeBase):
    """Declarative base for shops, content_settings and llm_content_cache."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str, echo: bool) -> dict:
    options: dict = {"echo": echo}
    if not url.startswith("sqlite"):
        options.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
    return options


async def init_db(url: str | None = None, *, create_tables: bool | None = None) -> None:
    """Create the global engine and session factory (no-op when already set).

    Args:
        url: SQLAlchemy async URL, defaults to settings.database_url
        create_tables: Run metadata.create_all; defaults to
            settings.database_create_tables (False when Alembic owns the schema)
    """
    global _engine, _session_factory

    if _engine is not None:
        return

    settings = get_settings()
    db_url = url or settings.database_url
    if create_tables is None:
        create_tables = settings.database_create_tables

    _engine = create_async_engine(db_url, **_engine_options(db_url, settings.debug))
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)

    if create_tables:
        import llmstxt.db.models  # noqa: F401

        async with _engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Raises RuntimeError before init_db()."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory


async def ping_db() -> None:
    """Round-trip a trivial query; raises whatever the driver raises."""
    async with get_session_factory()() as session:
        await session.execute(text("SELECT 1"))
