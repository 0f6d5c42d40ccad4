"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps int — never pass a bare id where a UserId is meant
    - Coins are integers; amounts and prices are strictly positive
    - A ledger entry is either a PeerTransfer or a Purchase, never both
    - Purchases are still stored as self-transfers (sender == recipient == buyer)

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - Tagged ledger variants over from == to inspection: readers match on type,
      the self-transfer encoding stays a storage detail
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
TransferId = NewType("TransferId", int)


# ─── Value Types ─────────────────────────────────────────────────

Coins = NewType("Coins", int)   # >= 0 for balances, > 0 for amounts and prices

# Largest amount or balance a 32-bit INTEGER column holds.
MAX_COINS = 2**31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class LedgerEntryKind(str, Enum):
    """Ledger record tag — maps to the transfers.kind column."""
    TRANSFER = "transfer"
    PURCHASE = "purchase"


# ─── Ledger Variants ─────────────────────────────────────────────

@dataclass(frozen=True)
class PeerTransfer:
    """Coins moved from one user to another."""
    id: TransferId
    sender_id: UserId
    recipient_id: UserId
    amount: Coins
    created_at: datetime


@dataclass(frozen=True)
class Purchase:
    """Coins spent by a user on a catalog item."""
    id: TransferId
    user_id: UserId
    item_name: str
    price: Coins
    created_at: datetime


LedgerEntry = Union[PeerTransfer, Purchase]


# ─── History ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReceivedCoins:
    from_user: str
    amount: Coins


@dataclass(frozen=True)
class SentCoins:
    to_user: str
    amount: Coins


@dataclass
class CoinHistory:
    """Peer transfers seen from one user's side.

    partial is True when at least one record was dropped because its
    counterpart user could not be resolved.
    """
    received: list[ReceivedCoins] = field(default_factory=list)
    sent: list[SentCoins] = field(default_factory=list)
    partial: bool = False


# ─── Catalog ─────────────────────────────────────────────────────

DEFAULT_CATALOG: dict[str, int] = {
    "t-shirt": 80,
    "cup": 20,
    "book": 50,
    "pen": 10,
    "powerbank": 200,
    "hoody": 300,
    "umbrella": 200,
    "socks": 10,
    "wallet": 50,
    "pink-hoody": 500,
}
