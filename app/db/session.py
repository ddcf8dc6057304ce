"""
Database session and engine configuration.

This file sets up the async database connection using SQLAlchemy. The
engine and session factory are built explicitly by the application
factory (or by tests) instead of living at module level.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from app.db.base import Base


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the async database engine for ``settings.DATABASE_URL``."""
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,  # When DEBUG=True, prints SQL queries to console
        future=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions are used to interact with the database (read, write, update)."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Keeps data accessible after commit
    )


async def create_all(engine: AsyncEngine) -> None:
    """Create any missing tables (dev server and tests; deployments use Alembic)."""
    import app.models  # noqa: F401  registers every model on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def session_scope(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Open a session wrapped in a single transaction.

    Commits when the block exits normally; rolls back and re-raises otherwise,
    so callers never observe a half-applied write.
    """
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
