"""Wallet Audit — replays a user's purchase ledger against their inventory.

Invariants:
    - Read-only: never writes, never commits
    - Unknown user raises UserNotFoundError before anything else is read
    - consistent == no item where purchase count and owned quantity disagree
    - coins_in_circulation is the sum of every balance; purchases are the only
      operation that lowers it
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.domain_types import UserId
from merch_store.core.ledger_audit import find_inventory_discrepancies
from merch_store.services.balance_store import BalanceStore
from merch_store.services.inventory_store import InventoryStore
from merch_store.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class WalletAudit:
    user_id: UserId
    discrepancies: dict[str, tuple[int, int]]
    coins_in_circulation: int

    @property
    def consistent(self) -> bool:
        return not self.discrepancies


async def audit_wallet(db: AsyncSession, user_id: UserId) -> WalletAudit:
    balances = BalanceStore(db)
    await balances.get_balance(user_id)
    purchases = await LedgerStore(db).purchases_for(user_id)
    inventory = await InventoryStore(db).get_inventory(user_id)

    discrepancies = find_inventory_discrepancies(purchases, inventory)
    if discrepancies:
        logger.error(
            f"Inventory disagrees with purchase ledger for {sorted(discrepancies)}",
            extra={"user_id": user_id, "operation": "audit"},
        )
    return WalletAudit(
        user_id=user_id,
        discrepancies=discrepancies,
        coins_in_circulation=await balances.total_balance(),
    )
