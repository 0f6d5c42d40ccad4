"""Balance Store — per-user coin balance reads and guarded mutations.

Invariants:
    - Never commits: every write runs inside the caller's unit of work
    - try_debit is a single conditional UPDATE (balance >= amount in the WHERE clause):
      the funds check and the write are one atomic statement, so two concurrent
      debits of the same row serialize in the database and can never overdraw
    - credit is a single additive UPDATE guarded by balance <= MAX_COINS - amount
      (no read-modify-write in Python, no integer overflow in the column)

Design Decisions:
    - Conditional update for every debit instead of SELECT ... FOR UPDATE: one
      mechanism for send and purchase, no lock held across a Python round trip
    - synchronize_session=False: balances are never read back through identity-mapped
      objects inside a unit
"""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.domain_types import MAX_COINS, UserId
from merch_store.core.errors import UserNotFoundError
from merch_store.models.user import User


class BalanceStore:
    """Balance reads and guarded writes on the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_balance(self, user_id: UserId) -> int:
        result = await self.db.execute(
            select(User.balance).where(User.id == user_id),
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise UserNotFoundError(user_id)
        return balance

    async def exists(self, user_id: UserId) -> bool:
        result = await self.db.execute(select(User.id).where(User.id == user_id))
        return result.scalar_one_or_none() is not None

    async def try_debit(self, user_id: UserId, amount: int) -> bool:
        """Decrement balance by amount only if balance >= amount. True when applied."""
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .where(User.balance >= amount)
            .values(balance=User.balance - amount)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def credit(self, user_id: UserId, amount: int) -> bool:
        """Increment balance by amount. False when the row is missing or would pass MAX_COINS."""
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .where(User.balance <= MAX_COINS - amount)
            .values(balance=User.balance + amount)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def total_balance(self) -> int:
        """Sum of every balance — coins in circulation."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(User.balance), 0)),
        )
        return result.scalar_one()
