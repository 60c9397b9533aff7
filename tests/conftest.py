"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from watch_match.api.app import app
from watch_match.api.deps import get_library, get_matching_config
from watch_match.library.repository import SqlReferenceLibrary
from watch_match.matching.config import MatchingConfig
from watch_match.models.base import Base


@pytest.fixture
async def test_engine():
    """Create an async SQLite in-memory engine for tests."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to the test engine."""
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest.fixture
def library(test_session_factory) -> SqlReferenceLibrary:
    """SQL reference library backed by the test database."""
    return SqlReferenceLibrary(test_session_factory)


@pytest.fixture
async def api_client(library):
    """Async HTTP client hitting the FastAPI app with the test library."""
    app.dependency_overrides[get_library] = lambda: library
    app.dependency_overrides[get_matching_config] = lambda: MatchingConfig()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
