"""User Routes — provisioning hook for the user-management service.

Invariants:
    - New users start with settings.starting_balance coins
    - Duplicate username → 409 (UsernameTakenError via global handler)
"""

from fastapi import APIRouter, Depends, status

from merch_store.config import Settings, get_settings
from merch_store.infrastructure.database import DatabaseSessionManager, get_db_manager
from merch_store.schemas.wallet import UserCreate, UserResponse
from merch_store.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    manager: DatabaseSessionManager = Depends(get_db_manager),
    settings: Settings = Depends(get_settings),
):
    """Register a user with the starting balance."""
    async with manager.unit_of_work() as db:
        directory = UserDirectory(db, starting_balance=settings.starting_balance)
        user_id = await directory.create_user(body.username, body.password_hash)
    return UserResponse(
        id=user_id, username=body.username, coins=settings.starting_balance,
    )
