"""Transfer Engine — atomic send and purchase over the balance, ledger and inventory stores.

Invariants:
    - Every mutating call runs inside exactly one unit of work: all of its writes
      commit together or none do (debit without credit is never observable)
    - Balances never go negative: every debit is a guarded conditional update
    - Send rejects amounts outside [1, MAX_COINS], unknown recipients and self-sends
      before any write; a credit that would push a balance past MAX_COINS is refused
    - Purchase writes price debit, inventory +1 and a purchase ledger entry as one unit
    - The engine holds no locks and no mutable state; contention is per row in the store
    - A call that outlives its deadline is cancelled and raises DeadlineExceededError.
      The outcome is unknown: the cancel may land after the commit, so the caller
      must check state before repeating (no idempotency keys)
    - No retries: StoreUnavailableError propagates to the caller

Design Decisions:
    - Unit-of-work factory injected at construction (no global session state)
    - Send writes the two balance rows in ascending user-id order so opposite-direction
      transfers between the same pair acquire row locks in the same order
    - Domain errors raised by stores get the caller's user_id/operation stamped on
      their context here, where both are known
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from merch_store.core.domain_types import TransferId, UserId
from merch_store.core.enforce_transfer import check_amount, check_not_self_transfer
from merch_store.core.errors import (
    BalanceLimitExceededError, DeadlineExceededError, ErrorContext,
    InsufficientFundsError, MerchStoreError,
    RecipientNotFoundError, UserNotFoundError,
)
from merch_store.core.repository_protocols import UnitOfWorkFactory
from merch_store.services.balance_store import BalanceStore
from merch_store.services.catalog_store import CatalogStore
from merch_store.services.inventory_store import InventoryStore
from merch_store.services.ledger_store import LedgerStore
from merch_store.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransferEngine:
    """Coordinates the stores for one send or purchase at a time per call."""

    def __init__(
        self,
        unit_of_work: UnitOfWorkFactory,
        timeout_seconds: float | None = None,
    ):
        self._unit_of_work = unit_of_work
        self.timeout_seconds = timeout_seconds

    async def send(
        self, sender_id: UserId, recipient_username: str, amount: int,
    ) -> TransferId:
        """Move amount coins from sender to the user named recipient_username."""
        ctx = ErrorContext(user_id=sender_id, operation="send")
        check_amount(amount, ctx)
        transfer_id = await self._run(
            self._send(sender_id, recipient_username, amount, ctx), ctx,
        )
        logger.info(
            f"Sent {amount} coins to '{recipient_username}'",
            extra={
                "user_id": sender_id, "operation": "send",
                "amount": amount, "recipient": recipient_username,
            },
        )
        return transfer_id

    async def purchase(self, user_id: UserId, item_name: str) -> TransferId:
        """Buy one item_name for user_id at its catalog price."""
        ctx = ErrorContext(user_id=user_id, operation="purchase")
        transfer_id = await self._run(self._purchase(user_id, item_name, ctx), ctx)
        logger.info(
            f"Purchased '{item_name}'",
            extra={"user_id": user_id, "operation": "purchase", "item": item_name},
        )
        return transfer_id

    # ─── Units of work ──────────────────────────────────────────

    async def _send(
        self,
        sender_id: UserId,
        recipient_username: str,
        amount: int,
        ctx: ErrorContext,
    ) -> TransferId:
        async with self._unit_of_work() as db:
            recipient_id = await UserDirectory(db).username_to_id(recipient_username)
            if recipient_id is None:
                raise RecipientNotFoundError(recipient_username, ctx)
            check_not_self_transfer(sender_id, recipient_id, ctx)

            balances = BalanceStore(db)
            if recipient_id < sender_id:
                await self._credit(balances, recipient_id, recipient_username, amount, ctx)
                await self._debit(balances, sender_id, amount, ctx)
            else:
                await self._debit(balances, sender_id, amount, ctx)
                await self._credit(balances, recipient_id, recipient_username, amount, ctx)

            return await LedgerStore(db).append_transfer(sender_id, recipient_id, amount)

    async def _purchase(
        self, user_id: UserId, item_name: str, ctx: ErrorContext,
    ) -> TransferId:
        async with self._unit_of_work() as db:
            price = await CatalogStore(db).get_price(item_name)
            await self._debit(BalanceStore(db), user_id, price, ctx)
            await InventoryStore(db).grant(user_id, item_name)
            return await LedgerStore(db).append_purchase(user_id, item_name, price)

    # ─── Helpers ────────────────────────────────────────────────

    @staticmethod
    async def _debit(
        balances: BalanceStore, user_id: UserId, amount: int, ctx: ErrorContext,
    ) -> None:
        if await balances.try_debit(user_id, amount):
            return
        if not await balances.exists(user_id):
            raise UserNotFoundError(user_id, ctx)
        raise InsufficientFundsError(amount, ctx)

    @staticmethod
    async def _credit(
        balances: BalanceStore,
        user_id: UserId,
        username: str,
        amount: int,
        ctx: ErrorContext,
    ) -> None:
        if await balances.credit(user_id, amount):
            return
        # Row vanished between resolution and credit.
        if not await balances.exists(user_id):
            raise RecipientNotFoundError(username, ctx)
        raise BalanceLimitExceededError(amount, ctx)

    async def _run(self, operation: Awaitable[T], ctx: ErrorContext) -> T:
        try:
            if self.timeout_seconds is None:
                return await operation
            return await asyncio.wait_for(operation, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                f"Deadline of {self.timeout_seconds}s exceeded, outcome unknown",
                extra={"user_id": ctx.user_id, "operation": ctx.operation},
            )
            raise DeadlineExceededError(self.timeout_seconds or 0.0, ctx)
        except MerchStoreError as exc:
            if exc.context.user_id is None:
                exc.context.user_id = ctx.user_id
            if exc.context.operation is None:
                exc.context.operation = ctx.operation
            logger.warning(
                f"{ctx.operation} failed: {exc.message}",
                extra={
                    "user_id": ctx.user_id, "operation": ctx.operation,
                    "error_code": exc.code,
                },
            )
            raise
