"""Ledger Store — append-only transfer records and history retrieval.

Invariants:
    - Only inserts; no method updates or deletes a transfer row
    - Purchases are written as self-transfers tagged kind="purchase" with the item name
    - Rows read back as tagged variants (PeerTransfer | Purchase), never as raw rows
    - get_history skips records whose counterpart cannot be resolved and flags the
      result partial instead of failing

Design Decisions:
    - Counterpart usernames fetched in one batched lookup through the IdentityResolver,
      projection done by core/ledger_history.py (pure)
    - Entries ordered by id: retrieval order, monotonic with commit order per row
"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.domain_types import (
    CoinHistory, LedgerEntry, LedgerEntryKind, PeerTransfer, Purchase,
    TransferId, UserId,
)
from merch_store.core.ledger_history import build_history, counterpart_ids
from merch_store.core.repository_protocols import IdentityResolver
from merch_store.models.transfer import Transfer

logger = logging.getLogger(__name__)


def _to_entry(row: Transfer) -> LedgerEntry:
    if row.kind == LedgerEntryKind.PURCHASE.value:
        return Purchase(
            id=TransferId(row.id),
            user_id=UserId(row.from_user_id),
            item_name=row.item_name or "",
            price=row.amount,
            created_at=row.created_at,
        )
    return PeerTransfer(
        id=TransferId(row.id),
        sender_id=UserId(row.from_user_id),
        recipient_id=UserId(row.to_user_id),
        amount=row.amount,
        created_at=row.created_at,
    )


class LedgerStore:
    """Append-only access to the transfers table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append_transfer(
        self, sender_id: UserId, recipient_id: UserId, amount: int,
    ) -> TransferId:
        row = Transfer(
            from_user_id=sender_id,
            to_user_id=recipient_id,
            amount=amount,
            kind=LedgerEntryKind.TRANSFER.value,
        )
        self.db.add(row)
        await self.db.flush()
        return TransferId(row.id)

    async def append_purchase(
        self, user_id: UserId, item_name: str, price: int,
    ) -> TransferId:
        row = Transfer(
            from_user_id=user_id,
            to_user_id=user_id,
            amount=price,
            kind=LedgerEntryKind.PURCHASE.value,
            item_name=item_name,
        )
        self.db.add(row)
        await self.db.flush()
        return TransferId(row.id)

    async def purchases_for(self, user_id: UserId) -> list[Purchase]:
        result = await self.db.execute(
            select(Transfer)
            .where(Transfer.from_user_id == user_id)
            .where(Transfer.kind == LedgerEntryKind.PURCHASE.value)
            .order_by(Transfer.id),
        )
        return [_to_entry(row) for row in result.scalars().all()]

    async def get_history(
        self, user_id: UserId, resolver: IdentityResolver,
    ) -> CoinHistory:
        """Received and sent peer transfers with counterpart usernames."""
        result = await self.db.execute(
            select(Transfer)
            .where(or_(
                Transfer.from_user_id == user_id,
                Transfer.to_user_id == user_id,
            ))
            .where(Transfer.kind == LedgerEntryKind.TRANSFER.value)
            .where(Transfer.from_user_id != Transfer.to_user_id)
            .order_by(Transfer.id),
        )
        entries = [_to_entry(row) for row in result.scalars().all()]
        usernames = await resolver.usernames_for(counterpart_ids(user_id, entries))
        history = build_history(user_id, entries, usernames)
        if history.partial:
            logger.warning(
                "Coin history has entries with unresolvable counterparts, skipped",
                extra={"user_id": user_id, "operation": "get_history"},
            )
        return history
