# tests/conftest.py

"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import AsyncGenerator

import pytest
from duelrank.db.models import Base, Player
from duelrank.db.session import enable_sqlite_foreign_keys, get_db
from duelrank.main import app
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


@pytest.fixture
async def test_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh SQLite database file per test.

    A file (rather than :memory:) lets several connections see the same
    data, which the concurrency tests need.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'duelrank.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for tests that need independent sessions."""
    return async_sessionmaker(
        bind=test_engine, autoflush=False, expire_on_commit=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Fixture to provide a database session to a test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def make_player(db_session: AsyncSession):
    """Factory fixture that inserts a committed player and returns it.

    A rollback on the shared session expires the returned instance, so tests
    that expect one should keep the plain id.
    """

    async def _make_player(username: str, rating: int | None = None) -> Player:
        player = Player(username=username)
        if rating is not None:
            player.rating = rating
        db_session.add(player)
        await db_session.commit()
        return player

    return _make_player


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Fixture to provide an async test client for the API."""

    # Override the get_db dependency to use the test database, rolling back
    # on errors the way get_db does
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db_session
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Clean up the override after the test
    del app.dependency_overrides[get_db]
