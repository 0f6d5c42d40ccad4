"""User Directory — identity resolution and user provisioning.

Invariants:
    - Implements core.repository_protocols.IdentityResolver
    - Lookups return None for unknown users; they never raise for a miss
    - create_user provisions the configured starting balance and never commits

Design Decisions:
    - usernames_for batches counterpart resolution into one IN query
    - Duplicate usernames checked up front for a clean error, the unique index
      still guards the race between two concurrent registrations
"""

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.core.domain_types import UserId
from merch_store.core.errors import UsernameTakenError
from merch_store.models.user import User

logger = logging.getLogger(__name__)


class UserDirectory:
    """Username <-> id lookups on the users table."""

    def __init__(self, db: AsyncSession, starting_balance: int = 0):
        self.db = db
        self.starting_balance = starting_balance

    async def username_to_id(self, username: str) -> UserId | None:
        result = await self.db.execute(
            select(User.id).where(User.username == username),
        )
        user_id = result.scalar_one_or_none()
        return UserId(user_id) if user_id is not None else None

    async def id_to_username(self, user_id: UserId) -> str | None:
        result = await self.db.execute(
            select(User.username).where(User.id == user_id),
        )
        return result.scalar_one_or_none()

    async def usernames_for(self, user_ids: Iterable[UserId]) -> dict[int, str]:
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(User.id, User.username).where(User.id.in_(ids)),
        )
        return {user_id: username for user_id, username in result.all()}

    async def create_user(self, username: str, password_hash: str) -> UserId:
        """Register a user with the starting balance. Raises UsernameTakenError."""
        if await self.username_to_id(username) is not None:
            raise UsernameTakenError(username)
        user = User(
            username=username,
            password_hash=password_hash,
            balance=self.starting_balance,
        )
        self.db.add(user)
        try:
            await self.db.flush()
        except IntegrityError:
            raise UsernameTakenError(username)
        logger.info(
            f"User '{username}' created",
            extra={"user_id": user.id, "operation": "create_user"},
        )
        return UserId(user.id)
