"""Catalog Store — read-mostly price list.

Invariants:
    - get_price raises ItemNotFoundError for unknown names (never returns 0 or None)
    - seed only inserts missing items; existing prices are left untouched
"""

from collections.abc import Mapping

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.errors import ItemNotFoundError
from merch_store.models.catalog_item import CatalogItem


class CatalogStore:
    """Lookups against catalog_items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_price(self, item_name: str) -> int:
        result = await self.db.execute(
            select(CatalogItem.price).where(CatalogItem.name == item_name),
        )
        price = result.scalar_one_or_none()
        if price is None:
            raise ItemNotFoundError(item_name)
        return price

    async def list_items(self) -> list[CatalogItem]:
        result = await self.db.execute(
            select(CatalogItem).order_by(CatalogItem.price, CatalogItem.name),
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(CatalogItem))
        return result.scalar_one()

    async def seed(self, items: Mapping[str, int]) -> int:
        """Insert catalog items that are not present yet. Returns how many were added."""
        result = await self.db.execute(select(CatalogItem.name))
        existing = set(result.scalars().all())
        added = 0
        for name, price in items.items():
            if name in existing:
                continue
            self.db.add(CatalogItem(name=name, price=price))
            added += 1
        await self.db.flush()
        return added
