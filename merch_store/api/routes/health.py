"""Health & Readiness Probes — liveness and readiness for the orchestrator.

Invariants:
    - GET /health/ answers 200 whenever the process is up (liveness)
    - GET /health/ready answers 503 unless the database is reachable AND the
      catalog is seeded; a wallet with no catalog cannot serve purchases

Design Decisions:
    - db_manager read from the module at call time: it is created by the
      lifespan, after this router is imported
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from merch_store.core.errors import StoreUnavailableError
from merch_store.infrastructure import database
from merch_store.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "merch-store-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check():
    """Readiness: database reachable and catalog items present."""
    manager = database.db_manager
    if manager is None or not await manager.health_check():
        return _not_ready("database_unavailable")

    try:
        async with manager.session() as db:
            catalog_size = await CatalogStore(db).count()
    except StoreUnavailableError:
        return _not_ready("database_unavailable")
    if catalog_size == 0:
        logger.warning("Readiness failed: catalog is empty")
        return _not_ready("catalog_empty")

    return {
        "status": "ready",
        "checks": {"database": "healthy", "catalog_items": catalog_size},
    }


def _not_ready(reason: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": reason},
    )
