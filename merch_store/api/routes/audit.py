"""Audit Routes — ledger consistency check for the caller's wallet.

Invariants:
    - Always 200 for a known caller; an inconsistent wallet is reported in the
      body (consistent=false), not as an error status
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.api.dependencies import get_current_user_id
from merch_store.core.domain_types import UserId
from merch_store.infrastructure.database import get_db
from merch_store.schemas.wallet import AuditResponse
from merch_store.services.wallet_audit import audit_wallet

router = APIRouter(prefix="/api/v1/audit", tags=["audit"])


@router.get("", response_model=AuditResponse)
async def get_audit(
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return AuditResponse.from_audit(await audit_wallet(db, user_id))
