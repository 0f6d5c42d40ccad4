"""Route Dependencies — caller identity and service wiring for FastAPI.

Invariants:
    - The acting user id comes from the X-User-Id header set by the authenticating
      gateway; this service never parses credentials
    - Missing or non-positive X-User-Id → 401
    - One TransferEngine per request, bound to the shared session manager
"""

from fastapi import Depends, Header, HTTPException, status

from merch_store.config import Settings, get_settings
from merch_store.core.domain_types import UserId
from merch_store.infrastructure.database import DatabaseSessionManager, get_db_manager
from merch_store.services.transfer_engine import TransferEngine


async def get_current_user_id(
    x_user_id: int | None = Header(None, alias="X-User-Id"),
) -> UserId:
    if x_user_id is None or x_user_id <= 0:
        raise HTTPException(
            status.HTTP_401_UNAUTHORIZED, detail="Missing or invalid caller identity",
        )
    return UserId(x_user_id)


def get_transfer_engine(
    manager: DatabaseSessionManager = Depends(get_db_manager),
    settings: Settings = Depends(get_settings),
) -> TransferEngine:
    return TransferEngine(
        manager.unit_of_work, timeout_seconds=settings.operation_timeout_seconds,
    )
