"""Inventory Store — per-user owned quantities.

Invariants:
    - grant() is a single INSERT ... ON CONFLICT (user_id, item_name) DO UPDATE
      quantity = quantity + 1: two concurrent grants of the same item both land
    - get_inventory returns one key per item (never duplicate rows)

Design Decisions:
    - Dialect-specific insert constructs (postgresql / sqlite) both expose
      on_conflict_do_update with the same signature; picked from the bound dialect
"""

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.domain_types import UserId
from merch_store.models.inventory_item import InventoryItem

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class InventoryStore:
    """Upserts and reads on inventory_items."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def grant(self, user_id: UserId, item_name: str) -> None:
        """Add one unit of item_name to the user's inventory."""
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Inventory upsert not supported on {dialect}")
        stmt = insert(InventoryItem).values(
            user_id=user_id, item_name=item_name, quantity=1,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "item_name"],
            set_={"quantity": InventoryItem.quantity + 1},
        )
        await self.db.execute(stmt)

    async def get_inventory(self, user_id: UserId) -> dict[str, int]:
        result = await self.db.execute(
            select(InventoryItem.item_name, InventoryItem.quantity)
            .where(InventoryItem.user_id == user_id),
        )
        return {name: quantity for name, quantity in result.all()}
