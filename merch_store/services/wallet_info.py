"""Wallet Info — read-side aggregate of balance, inventory and coin history.

Invariants:
    - Read-only: never writes, never commits
    - Unknown user raises UserNotFoundError before inventory/history are read
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.domain_types import CoinHistory, UserId
from merch_store.services.balance_store import BalanceStore
from merch_store.services.inventory_store import InventoryStore
from merch_store.services.ledger_store import LedgerStore
from merch_store.services.user_directory import UserDirectory


@dataclass
class WalletInfo:
    coins: int
    inventory: dict[str, int]
    coin_history: CoinHistory


async def get_wallet_info(db: AsyncSession, user_id: UserId) -> WalletInfo:
    coins = await BalanceStore(db).get_balance(user_id)
    inventory = await InventoryStore(db).get_inventory(user_id)
    history = await LedgerStore(db).get_history(user_id, UserDirectory(db))
    return WalletInfo(coins=coins, inventory=inventory, coin_history=history)
