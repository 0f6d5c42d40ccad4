"""Transfer Preconditions — pure checks run before any atomic unit is opened.

Invariants:
    - Amount must be an int in [1, MAX_COINS] (bool is rejected even though it
      subclasses int); anything larger cannot be stored and is rejected here
      rather than failing in the driver
    - A user can never send coins to themselves (rejected, not a no-op)
    - Raise on the first violated rule; return None when all pass
"""

from merch_store.core.domain_types import MAX_COINS, UserId
from merch_store.core.errors import (
    ErrorContext, InvalidAmountError, SelfTransferRejectedError,
)


def check_amount(amount: object, context: ErrorContext | None = None) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(amount, context)
    if not 0 < amount <= MAX_COINS:
        raise InvalidAmountError(amount, context)


def check_not_self_transfer(
    sender_id: UserId, recipient_id: UserId, context: ErrorContext | None = None,
) -> None:
    if sender_id == recipient_id:
        raise SelfTransferRejectedError(context)
