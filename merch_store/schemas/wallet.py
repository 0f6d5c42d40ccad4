"""Wallet Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - SendCoinRequest.amount in [1, MAX_COINS]; toUser stripped, non-empty
    - Responses serialize with camelCase aliases (toUser, fromUser, coinHistory)
    - UserCreate.username: 1-64 chars, no whitespace

Design Decisions:
    - Aliases instead of camelCase attribute names: Python side stays snake_case,
      wire format stays compatible with existing merch-store clients
    - from_wallet_info classmethod keeps the domain -> wire mapping next to the schema
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from merch_store.core.domain_types import MAX_COINS
from merch_store.services.wallet_audit import WalletAudit
from merch_store.services.wallet_info import WalletInfo


class SendCoinRequest(BaseModel):
    """Peer transfer request — the sender is the authenticated caller."""
    model_config = ConfigDict(populate_by_name=True)

    to_user: str = Field(alias="toUser", min_length=1, max_length=64)
    amount: int = Field(gt=0, le=MAX_COINS)

    @field_validator("to_user")
    @classmethod
    def strip_to_user(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("toUser cannot be empty or whitespace")
        return v


class TransferResponse(BaseModel):
    status: str = "ok"
    transfer_id: int = Field(serialization_alias="transferId")


class InventoryEntry(BaseModel):
    type: str
    quantity: int


class ReceivedEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_user: str = Field(alias="fromUser")
    amount: int


class SentEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to_user: str = Field(alias="toUser")
    amount: int


class CoinHistoryResponse(BaseModel):
    received: list[ReceivedEntry] = []
    sent: list[SentEntry] = []
    partial: bool = False


class InfoResponse(BaseModel):
    """Balance, inventory and coin history of the caller."""
    model_config = ConfigDict(populate_by_name=True)

    coins: int
    inventory: list[InventoryEntry]
    coin_history: CoinHistoryResponse = Field(alias="coinHistory")

    @classmethod
    def from_wallet_info(cls, info: WalletInfo) -> "InfoResponse":
        history = info.coin_history
        return cls(
            coins=info.coins,
            inventory=[
                InventoryEntry(type=name, quantity=quantity)
                for name, quantity in sorted(info.inventory.items())
            ],
            coin_history=CoinHistoryResponse(
                received=[
                    ReceivedEntry(from_user=r.from_user, amount=r.amount)
                    for r in history.received
                ],
                sent=[
                    SentEntry(to_user=s.to_user, amount=s.amount)
                    for s in history.sent
                ],
                partial=history.partial,
            ),
        )


class CatalogItemResponse(BaseModel):
    name: str
    price: int


class UserCreate(BaseModel):
    """User provisioning — password_hash is produced by the auth service, opaque here."""
    username: str = Field(min_length=1, max_length=64, pattern=r"^\S+$")
    password_hash: str = Field(min_length=1, max_length=255)


class UserResponse(BaseModel):
    id: int
    username: str
    coins: int


class DiscrepancyEntry(BaseModel):
    item: str
    purchased: int
    owned: int


class AuditResponse(BaseModel):
    """Inventory-vs-ledger check for the caller's wallet."""
    model_config = ConfigDict(populate_by_name=True)

    consistent: bool
    discrepancies: list[DiscrepancyEntry]
    coins_in_circulation: int = Field(alias="coinsInCirculation")

    @classmethod
    def from_audit(cls, audit: WalletAudit) -> "AuditResponse":
        return cls(
            consistent=audit.consistent,
            discrepancies=[
                DiscrepancyEntry(item=item, purchased=purchased, owned=owned)
                for item, (purchased, owned) in sorted(audit.discrepancies.items())
            ],
            coins_in_circulation=audit.coins_in_circulation,
        )
