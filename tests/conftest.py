"""Pytest configuration and fixtures.

Unit tests run against isolated in-memory components (one VersionedCache /
KeyedMutex per test). DB-dependent fixtures use
app.infrastructure.persistence.database and skip without Postgres.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.cache.memory_store import InMemoryKeyValueStore
from app.infrastructure.cache.versioned_cache import VersionedCache
from app.infrastructure.concurrency.keyed_mutex import KeyedMutex
from app.infrastructure.persistence import database


class FakeClock:
    """Monotonic clock advanced by hand (for TTL tests)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store(clock: FakeClock) -> InMemoryKeyValueStore:
    """In-memory backing store driven by the fake clock."""
    return InMemoryKeyValueStore(clock=clock)


@pytest.fixture
def cache(memory_store: InMemoryKeyValueStore) -> VersionedCache:
    """Fresh VersionedCache per test (own version table and tag index)."""
    return VersionedCache(memory_store, default_ttl=1800)


@pytest.fixture
def mutex() -> KeyedMutex:
    return KeyedMutex(max_concurrent=10)


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL. Skips (pytest.skip) when Postgres is not
    configured. Use @pytest.mark.requires_db to mark tests that need this
    fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL "
            "(postgresql+asyncpg://...) and create the schema"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()
    # Engine connections are bound to this test's event loop.
    await database.dispose_engine()
