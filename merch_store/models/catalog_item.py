"""Catalog Item ORM — read-only price list keyed by item name.

Invariants:
    - name is the primary key
    - price > 0
    - Rows are seeded once (migration or CatalogStore.seed), never updated at runtime
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from merch_store.db.base import Base


class CatalogItem(Base):
    """Purchasable item."""
    __tablename__ = "catalog_items"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_catalog_items_price_positive"),
    )

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
