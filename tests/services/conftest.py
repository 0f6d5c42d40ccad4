"""Service test fixtures — async DB, stores, transfer engine, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the catalog seeded
    - manager is a DatabaseSessionManager bound to the test engine, so the engine
      under test runs through the real unit_of_work() rollback path
    - get_db / get_db_manager dependencies overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; both upsert and conditional
      update have SQLite equivalents
    - Concurrency tests build their own file-backed database (in-memory SQLite
      shares one connection across sessions, which would serialize everything)
"""

import pytest
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import merch_store.models  # noqa: F401
from merch_store.core.domain_types import DEFAULT_CATALOG
from merch_store.db.base import Base
from merch_store.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
import merch_store.infrastructure.database as db_module
from merch_store.main import app
from merch_store.models.transfer import Transfer
from merch_store.services.catalog_store import CatalogStore
from merch_store.services.ledger_store import _to_entry
from merch_store.services.transfer_engine import TransferEngine
from merch_store.services.user_directory import UserDirectory


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as session:
        await CatalogStore(session).seed(DEFAULT_CATALOG)
        await session.commit()
    return factory


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def manager(test_engine, test_session_factory):
    """Session manager bound to the in-memory test engine."""
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    return fake_manager


@pytest.fixture
def transfer_engine(manager):
    return TransferEngine(manager.unit_of_work)


@pytest.fixture
def make_user(manager):
    """Create a user with a given balance; returns the new user id."""
    async def _make(username: str, balance: int = 1000) -> int:
        async with manager.unit_of_work() as db:
            directory = UserDirectory(db, starting_balance=balance)
            return await directory.create_user(username, f"hash-{username}")
    return _make


@pytest.fixture
def read(manager):
    """Run a read-only callable against a fresh session: await read(fn)."""
    async def _read(fn):
        async with manager.session() as db:
            return await fn(db)
    return _read


@pytest.fixture
async def client(manager, test_session_factory):
    """FastAPI test client with DB dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_manager] = lambda: manager

    original_manager = db_module.db_manager
    db_module.db_manager = manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def ledger_entries(read):
    """Every committed ledger entry touching a user, oldest first: await ledger_entries(id)."""
    async def _entries(user_id: int):
        async def _query(db):
            result = await db.execute(
                select(Transfer)
                .where(or_(
                    Transfer.from_user_id == user_id,
                    Transfer.to_user_id == user_id,
                ))
                .order_by(Transfer.id),
            )
            return [_to_entry(row) for row in result.scalars().all()]
        return await read(_query)
    return _entries
