"""Merch Store API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MerchStoreError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from merch_store.api.error_handlers import register_error_handlers
from merch_store.api.routes import audit, catalog, health, users, wallet
from merch_store.config import get_settings
from merch_store.infrastructure import database
from merch_store.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Merch Store API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Merch Store API shutting down")


app = FastAPI(
    title="Merch Store API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(wallet.router)
app.include_router(catalog.router)
app.include_router(users.router)
app.include_router(audit.router)

register_error_handlers(app)


def run() -> None:
    """Console entry point: serve the API with uvicorn (HOST/PORT from the environment)."""
    settings = get_settings()
    uvicorn.run(
        "merch_store.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
