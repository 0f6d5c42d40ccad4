"""Database Session Manager — engine, sessions and atomic units of work for the wallet.

Invariants:
    - A session that sees a SQLAlchemy failure is rolled back before the error leaves it
    - unit_of_work() commits only on clean exit; any exception, cancellation included,
      rolls the whole unit back before propagating
    - Callers only ever see StoreUnavailableError, never a raw SQLAlchemy exception
    - SQLite writers wait up to SQLITE_BUSY_TIMEOUT_SECONDS for the file lock instead
      of failing immediately (local runs and tests)

Design Decisions:
    - One db_manager per process, created and disposed by the FastAPI lifespan
    - expire_on_commit=False: balances returned after commit stay readable
    - The manager is handed to the transfer engine as its unit-of-work factory;
      the engine never touches db_manager directly
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import make_url, text

from merch_store.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 5.0

# Most specific first: IntegrityError and OperationalError are DBAPIError subclasses.
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _describe_failure(exc: SQLAlchemyError) -> tuple[str, str]:
    for kind, message, operation in _FAILURES:
        if isinstance(exc, kind):
            return message, operation
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        options: dict = {"pool_pre_ping": True, "pool_recycle": 3600}
        if make_url(database_url).get_backend_name() == "sqlite":
            options["connect_args"] = {"timeout": SQLITE_BUSY_TIMEOUT_SECONDS}
        self.engine = create_async_engine(
            database_url, pool_size=pool_size, max_overflow=max_overflow, **options,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that rolls back and raises StoreUnavailableError on any DB failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _describe_failure(e)
            logger.error(
                f"{message}: {e}",
                extra={"operation": operation, "error_code": "STORE_UNAVAILABLE"},
            )
            raise StoreUnavailableError(message, operation) from e
        finally:
            await session.close()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncGenerator[AsyncSession, None]:
        """Atomic unit: commit on clean exit, full rollback on any exception."""
        async with self.session() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency for the session manager (unit-of-work factory)."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for read-only database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
