# src/duelrank/db/session.py

"""Database session management."""
import logging
import os
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = logging.getLogger(__name__)

# Database URL from environment variable with SQLite fallback for development
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./duelrank.db")


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite leaves foreign key enforcement off unless asked per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _create_engine() -> AsyncEngine:
    """Create the async engine with appropriate configuration.

    SQLite doesn't support connection pooling, so we only configure
    pool settings for other databases like PostgreSQL.
    """
    url = DATABASE_URL
    echo = os.getenv("DB_ECHO", "false").lower() == "true"

    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(url, echo=echo)
        enable_sqlite_foreign_keys(sqlite_engine)
        return sqlite_engine

    # PostgreSQL and other databases get full pool configuration
    return create_async_engine(
        url,
        pool_size=int(os.getenv("DB_POOL_SIZE", "20")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
        echo=echo,
    )


# The engine is the core interface to the database.
engine = _create_engine()

# autoflush=False: writes reach the database only on explicit flush/commit.
# expire_on_commit=False: a committed match can still be serialized.
AsyncSessionLocal = async_sessionmaker(
    bind=engine, autoflush=False, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session.

    Automatically handles rollback on exceptions and ensures
    the session is properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error, rolling back: {e}")
            await session.rollback()
            raise
