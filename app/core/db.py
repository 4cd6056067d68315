"""
Database connection pool and session helpers
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base

from app.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

Base = declarative_base()

Connector = Callable[[str], Awaitable[AsyncEngine]]


async def connect_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an engine and open a first connection right away.

    Opening the connection here makes an unreachable database fail the
    acquire call instead of the first query. Tables and indexes are created
    on that connection.
    """
    import app.models  # noqa: F401  registers tables on Base.metadata

    engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        await engine.dispose()
        raise
    return engine


class ConnectionPool:
    """Process-wide cache of one database engine.

    Holds two slots: the established engine and the in-flight connection
    attempt. Concurrent callers of :meth:`acquire` share a single attempt.
    """

    def __init__(self, database_url: Optional[str], connector: Optional[Connector] = None, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._connector = connector or (lambda url: connect_engine(url, echo=self.echo))
        self._engine: Optional[AsyncEngine] = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def connected(self) -> bool:
        return self._engine is not None

    async def acquire(self) -> AsyncEngine:
        """Return the shared engine, connecting on first use."""
        if not self.database_url:
            raise ConfigurationError(
                "DATABASE_URL is not defined. Set it in the environment or in .env"
            )

        if self._engine is not None:
            return self._engine

        if self._pending is None:
            logger.info("Opening database connection")
            self._pending = asyncio.ensure_future(self._connector(self.database_url))

        pending = self._pending
        try:
            engine = await asyncio.shield(pending)
        except Exception:
            # Only the first waiter to fail clears the slot
            if self._pending is pending:
                self._pending = None
                logger.warning("Database connection attempt failed", exc_info=True)
            raise

        self._engine = engine
        return engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session bound to the shared engine."""
        engine = await self.acquire()
        async with AsyncSession(engine, expire_on_commit=False) as db:
            yield db

    async def dispose(self) -> None:
        """Close the engine and reset both slots."""
        engine, self._engine, self._pending = self._engine, None, None
        if engine is not None:
            await engine.dispose()
            logger.info("Database connection closed")


# Dependency to get a database session
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    pool: ConnectionPool = request.app.state.db
    async with pool.session() as db:
        yield db
