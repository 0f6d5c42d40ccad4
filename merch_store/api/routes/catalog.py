"""Catalog Routes — public price list."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from merch_store.infrastructure.database import get_db
from merch_store.schemas.wallet import CatalogItemResponse
from merch_store.services.catalog_store import CatalogStore

router = APIRouter(prefix="/api/v1/catalog", tags=["catalog"])


@router.get("", response_model=list[CatalogItemResponse])
async def list_catalog(db: AsyncSession = Depends(get_db)):
    items = await CatalogStore(db).list_items()
    return [CatalogItemResponse(name=i.name, price=i.price) for i in items]
