"""
Snippetbox — Database Engine & Session Factory
===============================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   `build_engine()` creates an async engine with connection pooling from
       the settings; `build_session_factory()` wraps it in an
       `async_sessionmaker`. Both are owned by the `Application` container;
       the data-access services open one AsyncSession per operation.
Who:   Called by `build_application()` at startup; models inherit from `Base`.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite (aiosqlite, used in tests and local development) ignores the
    sizing options, so they are only passed for server databases.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snippetbox.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations.
    """
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for `settings.database_url`.

    Returns:
        AsyncEngine managing the connection pool. Nothing connects until the
        first query runs.
    """
    options = {
        # SQL echo only in DEBUG mode
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: attributes stay readable after commit, which the
    services rely on when they convert rows into schemas.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
