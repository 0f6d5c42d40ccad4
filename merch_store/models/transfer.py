"""Transfer ORM — the append-only ledger of every balance-affecting event.

Invariants:
    - Rows are inserted, never updated or deleted
    - amount > 0
    - kind == "transfer": from_user_id != to_user_id, item_name is NULL
    - kind == "purchase": from_user_id == to_user_id == buyer, item_name set, amount == price

Design Decisions:
    - Explicit kind tag on top of the self-transfer encoding: history and audit
      filter on kind instead of comparing ids
    - No ORM relationships to users: the ledger is read by id and resolved through
      the user directory, so a missing counterpart never breaks a load
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from merch_store.core.domain_types import LedgerEntryKind
from merch_store.db.base import Base


class Transfer(Base):
    """One immutable ledger record."""
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    from_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), index=True, nullable=False,
    )
    to_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), index=True, nullable=False,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(
        String(16), nullable=False, default=LedgerEntryKind.TRANSFER.value,
    )
    item_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
