"""Concurrency — guarded debits never overdraw under concurrent callers.

Invariants:
    - N concurrent sends from one sender never drive its balance negative
    - Final balance == initial − sum of sends that reported success
    - Ledger holds exactly one record per successful operation
    - A call either succeeds or fails with a typed error (no partial effects)

Design Decisions:
    - File-backed SQLite with a real connection pool: each unit gets its own
      connection, so the database (not the test) serializes the writers
    - StoreUnavailableError is an accepted outcome: SQLite may refuse a lock
      instead of waiting; the money invariants must hold either way
"""

import asyncio

import pytest
from sqlalchemy import func, select

import merch_store.models  # noqa: F401
from merch_store.core.domain_types import DEFAULT_CATALOG
from merch_store.core.errors import InsufficientFundsError, StoreUnavailableError
from merch_store.db.base import Base
from merch_store.infrastructure.database import DatabaseSessionManager
from merch_store.models.transfer import Transfer
from merch_store.services.balance_store import BalanceStore
from merch_store.services.catalog_store import CatalogStore
from merch_store.services.inventory_store import InventoryStore
from merch_store.services.transfer_engine import TransferEngine
from merch_store.services.user_directory import UserDirectory


@pytest.fixture
async def file_manager(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'wallet.db'}",
        pool_size=5, max_overflow=20,
    )
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with manager.unit_of_work() as db:
        await CatalogStore(db).seed(DEFAULT_CATALOG)
    yield manager
    await manager.dispose()


async def _create(manager, username, balance):
    async with manager.unit_of_work() as db:
        return await UserDirectory(db, starting_balance=balance).create_user(username, "x")


async def _outcomes(calls):
    results = await asyncio.gather(*calls, return_exceptions=True)
    for r in results:
        if isinstance(r, BaseException):
            assert isinstance(r, (InsufficientFundsError, StoreUnavailableError)), r
    return results


async def test_concurrent_sends_never_overdraw(file_manager):
    sender = await _create(file_manager, "sender", 100)
    recipient = await _create(file_manager, "recipient", 0)
    engine = TransferEngine(file_manager.unit_of_work)

    results = await _outcomes(
        [engine.send(sender, "recipient", 10) for _ in range(25)],
    )
    successes = sum(1 for r in results if not isinstance(r, BaseException))

    async with file_manager.session() as db:
        balances = BalanceStore(db)
        sender_balance = await balances.get_balance(sender)
        recipient_balance = await balances.get_balance(recipient)
        ledger_rows = (await db.execute(select(func.count(Transfer.id)))).scalar_one()

    assert 1 <= successes <= 10
    assert sender_balance >= 0
    assert sender_balance == 100 - 10 * successes
    assert recipient_balance == 10 * successes
    assert ledger_rows == successes


async def test_concurrent_purchases_never_overdraw(file_manager):
    buyer = await _create(file_manager, "buyer", 100)
    engine = TransferEngine(file_manager.unit_of_work)

    results = await _outcomes([engine.purchase(buyer, "cup") for _ in range(12)])
    successes = sum(1 for r in results if not isinstance(r, BaseException))

    async with file_manager.session() as db:
        balance = await BalanceStore(db).get_balance(buyer)
        inventory = await InventoryStore(db).get_inventory(buyer)

    assert 1 <= successes <= 5
    assert balance == 100 - DEFAULT_CATALOG["cup"] * successes
    assert inventory.get("cup", 0) == successes


async def test_opposite_direction_sends_conserve_total(file_manager):
    a = await _create(file_manager, "a", 500)
    b = await _create(file_manager, "b", 500)
    engine = TransferEngine(file_manager.unit_of_work)

    calls = []
    for _ in range(10):
        calls.append(engine.send(a, "b", 7))
        calls.append(engine.send(b, "a", 3))
    await _outcomes(calls)

    async with file_manager.session() as db:
        total = await BalanceStore(db).total_balance()
        a_balance = await BalanceStore(db).get_balance(a)
        b_balance = await BalanceStore(db).get_balance(b)

    assert total == 1000
    assert a_balance >= 0 and b_balance >= 0
