"""ORM Models — SQLAlchemy declarative models for all wallet entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the owner of balance, ledger entries and inventory

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from merch_store.models.user import User  # noqa: F401
from merch_store.models.transfer import Transfer  # noqa: F401
from merch_store.models.catalog_item import CatalogItem  # noqa: F401
from merch_store.models.inventory_item import InventoryItem  # noqa: F401
