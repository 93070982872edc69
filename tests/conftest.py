"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolated pagination settings per test
    - Document Store Fixtures: in-memory motor-compatible collection
    - Database Fixtures: SQLAlchemy engine and session on in-memory SQLite
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from keyset_connection.core.database import MongoStore
from keyset_connection.core.settings import PaginationSettings, clear_settings_cache
from tests.fixtures.memory_store import MemoryCollection
from tests.fixtures.models import NAMES, Base, Item

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Clear cached settings and PAGINATION_* env vars around each test."""
    for key in list(os.environ):
        if key.startswith("PAGINATION_"):
            monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> PaginationSettings:
    """Default pagination settings without environment influence."""
    return PaginationSettings(_env_file=None)


# ============================================================================
# Document Store Fixtures
# ============================================================================


@pytest.fixture
def collection() -> MemoryCollection:
    """Collection seeded with eight named documents (identities 1..8).

    Example:
        async def test_count(collection):
            assert await collection.count_documents({}) == 8
    """
    created = datetime(2024, 1, 1, tzinfo=UTC)
    return MemoryCollection(
        "models",
        [
            {**doc, "createdAt": created + timedelta(minutes=index)}
            for index, doc in enumerate(NAMES)
        ],
    )


@pytest.fixture
def store(collection: MemoryCollection) -> MongoStore:
    """Document store over the seeded collection; cursors coerce back to int."""
    return MongoStore(collection, identity_factory=int)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a session on a fresh schema seeded with the eight names.

    Yields:
        Async database session for testing.
    """
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        session.add_all(
            [Item(id=index, name=doc["name"], rank=index % 3) for index, doc in enumerate(NAMES, 1)]
        )
        await session.commit()
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
