"""Initial schema — users, transfers, catalog_items, inventory_items; seeds the catalog.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Frozen copy of the catalog as of this revision.
_CATALOG_SEED = (
    ("t-shirt", 80),
    ("cup", 20),
    ("book", 50),
    ("pen", 10),
    ("powerbank", 200),
    ("hoody", 300),
    ("umbrella", 200),
    ("socks", 10),
    ("wallet", 50),
    ("pink-hoody", 500),
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("balance", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    catalog = op.create_table(
        "catalog_items",
        sa.Column("name", sa.String(64), primary_key=True),
        sa.Column("price", sa.Integer, nullable=False),
        sa.CheckConstraint("price > 0", name="ck_catalog_items_price_positive"),
    )

    op.create_table(
        "transfers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("from_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("to_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("kind", sa.String(16), nullable=False, server_default="transfer"),
        sa.Column("item_name", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
    )
    op.create_index("ix_transfers_from_user_id", "transfers", ["from_user_id"])
    op.create_index("ix_transfers_to_user_id", "transfers", ["to_user_id"])

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("item_name", sa.String(64), sa.ForeignKey("catalog_items.name"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.UniqueConstraint("user_id", "item_name", name="uq_inventory_user_item"),
        sa.CheckConstraint("quantity > 0", name="ck_inventory_items_quantity_positive"),
    )
    op.create_index("ix_inventory_items_user_id", "inventory_items", ["user_id"])

    op.bulk_insert(
        catalog,
        [{"name": name, "price": price} for name, price in _CATALOG_SEED],
    )


def downgrade() -> None:
    op.drop_index("ix_inventory_items_user_id", table_name="inventory_items")
    op.drop_table("inventory_items")
    op.drop_index("ix_transfers_to_user_id", table_name="transfers")
    op.drop_index("ix_transfers_from_user_id", table_name="transfers")
    op.drop_table("transfers")
    op.drop_table("catalog_items")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
