"""
Pytest configuration and fixtures.

Every test gets a fresh SQLite file database (aiosqlite), so concurrent
store queries fanned out by the composer each get their own connection.
"""

from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import event

from app.api.stats_utils.composer import StatsComposer
from app.core.cache import CacheStore, InvalidationCoordinator
from app.core.store import Store
from app.database import Base, build_engine, build_sessionmaker
from app.models.db import Coupon, Order, Product, User  # noqa: F401

# mid-March, so six- and twelve-month windows cross a year boundary
FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront-test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return build_sessionmaker(engine)


@pytest.fixture
def store(sessionmaker) -> Store:
    return Store(sessionmaker)


@pytest.fixture
def cache() -> CacheStore:
    return CacheStore()


@pytest.fixture
def invalidator(cache) -> InvalidationCoordinator:
    return InvalidationCoordinator(cache)


@pytest.fixture
def composer(store, cache) -> StatsComposer:
    return StatsComposer(store, cache, marketing_cost_ratio=0.30, clock=lambda: FIXED_NOW)


@pytest.fixture
def executed_statements(engine):
    """Collects every SQL statement sent to the database."""
    statements: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine.sync_engine, "before_cursor_execute", record)
    yield statements
    event.remove(engine.sync_engine, "before_cursor_execute", record)


@pytest.fixture
def api(engine, sessionmaker, store, cache, invalidator, composer):
    """The app wired to the per-test database and the fixture cache."""
    from main import create_app

    app = create_app(sessionmaker=sessionmaker, bind=engine, create_tables=False)
    app.state.store = store
    app.state.cache = cache
    app.state.invalidator = invalidator
    app.state.composer = composer
    return app


@pytest_asyncio.fixture
async def client(api):
    transport = httpx.ASGITransport(app=api)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
