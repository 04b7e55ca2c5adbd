"""
Snippetbox — Database Engine & Session Factory
===============================================

What:  Async SQLAlchemy engine construction, declarative Base, and a
       transaction helper shared by the stores.
How:   `build_engine()` creates an async engine with connection pooling;
       `transaction()` yields an AsyncSession that commits on success and
       rolls back on any error.
Who:   The app factory builds one engine per process and hands its session
       factory to SnippetStore and UserStore.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings and are only
    passed for server databases. SQLite URLs (tests, local runs) use the
    driver's default pool, which rejects those arguments.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snippetbox.config import Settings, settings as default_settings

# Largest value the INTEGER primary keys can hold (32-bit signed)
MAX_ID = 2**31 - 1


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives Alembic."""
    pass


def build_engine(config: Optional[Settings] = None) -> AsyncEngine:
    """Create the async engine for `config.database_url`."""
    config = config or default_settings
    kwargs = {"echo": config.log_level == "DEBUG"}

    if not config.database_url.startswith("sqlite"):
        kwargs.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )

    return create_async_engine(config.database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: records stay readable after the commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    One unit of work.

    Commits when the block exits normally, rolls back and re-raises on any
    exception, and always returns the connection to the pool.
    """
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine) -> None:
    """Create every table known to Base.metadata (tests and local SQLite)."""
    import snippetbox.models  # noqa: F401  registers the tables on Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
