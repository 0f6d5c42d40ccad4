"""Inventory Item ORM — how many of each catalog item a user owns.

Invariants:
    - Unique per (user_id, item_name): target of the upsert-with-increment
    - quantity > 0; a row exists only after the first purchase
"""

from sqlalchemy import (
    CheckConstraint, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from merch_store.db.base import Base


class InventoryItem(Base):
    """Owned quantity of one item for one user."""
    __tablename__ = "inventory_items"
    __table_args__ = (
        UniqueConstraint("user_id", "item_name", name="uq_inventory_user_item"),
        CheckConstraint("quantity > 0", name="ck_inventory_items_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), index=True, nullable=False,
    )
    item_name: Mapped[str] = mapped_column(
        String(64), ForeignKey("catalog_items.name"), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
