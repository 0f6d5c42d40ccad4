"""Wallet Routes — balance/history read, peer transfer, purchase.

Invariants:
    - Every route acts on behalf of the X-User-Id caller
    - Mutations go through TransferEngine only; errors surface via the global
      MerchStoreError handler (no try/except here)

Design Decisions:
    - Purchase is POST (it mutates), unlike the GET of the legacy merch-store API
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.api.dependencies import get_current_user_id, get_transfer_engine
from merch_store.core.domain_types import UserId
from merch_store.infrastructure.database import get_db
from merch_store.schemas.wallet import InfoResponse, SendCoinRequest, TransferResponse
from merch_store.services.transfer_engine import TransferEngine
from merch_store.services.wallet_info import get_wallet_info

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["wallet"])


@router.get("/info", response_model=InfoResponse)
async def get_info(
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Coins, inventory and coin history of the caller."""
    info = await get_wallet_info(db, user_id)
    return InfoResponse.from_wallet_info(info)


@router.post("/send-coin", response_model=TransferResponse)
async def send_coin(
    body: SendCoinRequest,
    user_id: UserId = Depends(get_current_user_id),
    engine: TransferEngine = Depends(get_transfer_engine),
):
    """Send coins from the caller to another user."""
    transfer_id = await engine.send(user_id, body.to_user, body.amount)
    return TransferResponse(transfer_id=transfer_id)


@router.post("/buy/{item}", response_model=TransferResponse)
async def buy_item(
    item: str,
    user_id: UserId = Depends(get_current_user_id),
    engine: TransferEngine = Depends(get_transfer_engine),
):
    """Buy one catalog item for the caller."""
    transfer_id = await engine.purchase(user_id, item)
    return TransferResponse(transfer_id=transfer_id)
