"""Database Session Manager — async engine lifecycle, connection phase, auto-rollback.

Invariants:
    - DatabaseSessionManager is the ONLY writer of the connection phase
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to StorageFault (core/errors.py)
    - OperationalError and raw socket errors (OSError) mark the phase DISCONNECTED;
      the next clean session marks it CONNECTED

Design Decisions:
    - One manager per process, created in the FastAPI lifespan and stored on app.state;
      the store adapter borrows sessions, health reporting reads the phase
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from shopfront.core.domain_types import ConnectionPhase
from shopfront.core.errors import NotReadyError, StorageFault

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the engine, reports its connection phase, hands out sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._phase = ConnectionPhase.DISCONNECTED

    @property
    def phase(self) -> ConnectionPhase:
        return self._phase

    @property
    def accepting_sessions(self) -> bool:
        """True once connected, and after a dropped connection (the pool may recover)."""
        return self._session_factory is not None and self._phase in (
            ConnectionPhase.CONNECTED, ConnectionPhase.DISCONNECTED,
        )

    def _engine_options(self) -> dict:
        # SQLite uses a static/null pool; sizing arguments are rejected there
        if self.database_url.startswith("sqlite"):
            return {}
        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }

    async def connect(self) -> None:
        """Create the engine and verify connectivity with SELECT 1."""
        self._phase = ConnectionPhase.CONNECTING
        try:
            self.engine = create_async_engine(
                self.database_url, **self._engine_options(),
            )
            self._session_factory = async_sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False,
            )
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            if self.engine is not None:
                await self.engine.dispose()
            self.engine = None
            self._session_factory = None
            self._phase = ConnectionPhase.DISCONNECTED
            logger.error(f"DB connect failed: {e}")
            raise StorageFault("connect") from e
        self._phase = ConnectionPhase.CONNECTED
        logger.info("DB connected")

    async def disconnect(self) -> None:
        """Dispose the engine. In-flight sessions have finished by the time this runs."""
        if self.engine is None:
            self._phase = ConnectionPhase.DISCONNECTED
            return
        self._phase = ConnectionPhase.DISCONNECTING
        try:
            await self.engine.dispose()
        finally:
            self.engine = None
            self._session_factory = None
            self._phase = ConnectionPhase.DISCONNECTED
            logger.info("DB disconnected")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        if self._session_factory is None:
            raise NotReadyError(self._phase.value)
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise StorageFault("commit") from e
        except OperationalError as e:
            await session.rollback()
            self._phase = ConnectionPhase.DISCONNECTED
            logger.error(f"DB operational error: {e}")
            raise StorageFault("execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StorageFault("query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StorageFault("unknown") from e
        except OSError as e:
            # Driver reconnects can surface raw socket errors (connection refused/reset)
            self._phase = ConnectionPhase.DISCONNECTED
            try:
                await session.rollback()
            except (SQLAlchemyError, OSError):
                logger.warning("Rollback after connection loss failed")
            logger.error(f"DB connection lost: {e!r}")
            raise StorageFault("execute") from e
        else:
            if self._phase is ConnectionPhase.DISCONNECTED:
                self._phase = ConnectionPhase.CONNECTED
        finally:
            await session.close()


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency — the manager installed by the lifespan."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise NotReadyError(ConnectionPhase.DISCONNECTED.value)
    return manager


def require_ready(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency for the product routes. Fails fast with 503 while
    the store is connecting or shutting down."""
    manager = get_db_manager(request)
    if not manager.accepting_sessions:
        raise NotReadyError(manager.phase.value)
    return manager
