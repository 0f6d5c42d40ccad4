"""Transfer Engine purchase — price debit, inventory grant, purchase ledger entry.

Invariants:
    - Successful purchase: balance -= price, inventory +1, one purchase ledger entry
    - Rejected purchase leaves balance, inventory and ledger untouched
    - Purchases never show up in sent/received history
"""

import pytest

from merch_store.core.domain_types import DEFAULT_CATALOG, Purchase
from merch_store.core.errors import (
    InsufficientFundsError, ItemNotFoundError, UserNotFoundError,
)
from merch_store.core.ledger_audit import find_inventory_discrepancies
from merch_store.services.balance_store import BalanceStore
from merch_store.services.inventory_store import InventoryStore
from merch_store.services.ledger_store import LedgerStore
from merch_store.services.user_directory import UserDirectory


async def test_purchase_debits_price_and_grants_item(transfer_engine, make_user, read):
    alice = await make_user("alice", 1000)

    await transfer_engine.purchase(alice, "pen")

    assert await read(lambda db: BalanceStore(db).get_balance(alice)) == 990
    assert await read(lambda db: InventoryStore(db).get_inventory(alice)) == {"pen": 1}


async def test_purchase_writes_one_self_referential_entry(
    transfer_engine, make_user, ledger_entries,
):
    alice = await make_user("alice", 1000)

    await transfer_engine.purchase(alice, "hoody")

    entries = await ledger_entries(alice)
    assert len(entries) == 1
    entry = entries[0]
    assert isinstance(entry, Purchase)
    assert entry.user_id == alice
    assert entry.item_name == "hoody"
    assert entry.price == DEFAULT_CATALOG["hoody"]


async def test_two_purchases_of_same_item_accumulate(transfer_engine, make_user, read):
    alice = await make_user("alice", 1000)

    await transfer_engine.purchase(alice, "cup")
    await transfer_engine.purchase(alice, "cup")

    assert await read(lambda db: InventoryStore(db).get_inventory(alice)) == {"cup": 2}


async def test_inventory_matches_purchase_ledger(transfer_engine, make_user, read):
    alice = await make_user("alice", 1000)
    for item in ("pen", "pen", "book", "socks", "pen"):
        await transfer_engine.purchase(alice, item)

    purchases = await read(lambda db: LedgerStore(db).purchases_for(alice))
    inventory = await read(lambda db: InventoryStore(db).get_inventory(alice))
    assert inventory == {"pen": 3, "book": 1, "socks": 1}
    assert find_inventory_discrepancies(purchases, inventory) == {}


async def test_purchase_insufficient_funds_changes_nothing(
    transfer_engine, make_user, read, ledger_entries,
):
    alice = await make_user("alice", 499)

    with pytest.raises(InsufficientFundsError):
        await transfer_engine.purchase(alice, "pink-hoody")

    assert await read(lambda db: BalanceStore(db).get_balance(alice)) == 499
    assert await read(lambda db: InventoryStore(db).get_inventory(alice)) == {}
    assert await ledger_entries(alice) == []


async def test_purchase_exact_balance_allowed(transfer_engine, make_user, read):
    alice = await make_user("alice", 500)

    await transfer_engine.purchase(alice, "pink-hoody")

    assert await read(lambda db: BalanceStore(db).get_balance(alice)) == 0


async def test_unknown_item_rejected(transfer_engine, make_user, read):
    alice = await make_user("alice", 1000)

    with pytest.raises(ItemNotFoundError) as exc_info:
        await transfer_engine.purchase(alice, "yacht")

    assert exc_info.value.context.user_id == alice
    assert exc_info.value.context.operation == "purchase"
    assert await read(lambda db: BalanceStore(db).get_balance(alice)) == 1000


async def test_unknown_user_rejected(transfer_engine):
    with pytest.raises(UserNotFoundError):
        await transfer_engine.purchase(12345, "pen")


async def test_purchases_excluded_from_history(transfer_engine, make_user, read):
    alice = await make_user("alice", 1000)

    await transfer_engine.purchase(alice, "pen")

    history = await read(lambda db: LedgerStore(db).get_history(alice, UserDirectory(db)))
    assert history.sent == [] and history.received == []


async def test_purchases_reduce_coins_in_circulation(transfer_engine, make_user, read):
    alice = await make_user("alice", 1000)
    await make_user("bob", 1000)
    before = await read(lambda db: BalanceStore(db).total_balance())

    await transfer_engine.purchase(alice, "umbrella")

    after = await read(lambda db: BalanceStore(db).total_balance())
    assert before - after == DEFAULT_CATALOG["umbrella"]
