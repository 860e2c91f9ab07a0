"""Database Session Manager — one async engine per process, sessions per request.

Invariants:
    - Every session rolls back on exception before the error leaves it
    - Driver failures escaping a session surface as BackOfficeError:
      constraint violations as ConflictError, everything else as DatabaseError
    - SQLite connections enforce foreign keys, so ON DELETE SET NULL on
      sales.product_id / sales.user_id behaves as on PostgreSQL

Design Decisions:
    - Singleton db_manager created in the lifespan, read through get_db
    - expire_on_commit=False: services return ORM rows after commit without
      triggering async lazy loads
    - Pool sizing applies to server databases only; SQLite keeps its own pool
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from app.core.errors import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for every new SQLite connection of `engine`."""
    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_recycle": 3600,
    }


class DatabaseSessionManager:
    """Owns the engine and hands out sessions with error translation."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        if database_url.startswith("sqlite"):
            enable_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f"Constraint violated at commit: {e.orig}")
            raise ConflictError(
                "Record conflicts with an existing one", field_name="unique",
            ) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"Database unreachable: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database operation failed: {e}")
            raise DatabaseError("Database operation failed", "query") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when a trivial query round-trips (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except (DatabaseError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    """Create the process-wide manager. Called once from the lifespan."""
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
