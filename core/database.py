"""Async SQLAlchemy database handle and session management.

The store is an explicitly constructed ``Database`` object rather than a
module-level engine. The API creates one in its lifespan hook, parks it
on ``app.state.db`` and disposes it at shutdown; routes reach it through
the ``get_session()`` FastAPI dependency.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from patterns.domain_config import DatabaseConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Database handle
# ---------------------------------------------------------------------------

class Database:
    """Engine plus session factory for one datastore.

    Usage::

        db = Database("sqlite+aiosqlite:///./tasks.db")
        await db.create_all()
        async with db.session() as session:
            ...
        await db.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.url = url
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        # SQLite uses its own pool classes that reject sizing arguments
        if not url.startswith("sqlite"):
            engine_kwargs["pool_size"] = pool_size
            engine_kwargs["max_overflow"] = max_overflow

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> "Database":
        return cls(
            config.url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            echo=config.echo,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session that commits on success and rolls back on error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create tables from the model metadata (dev/test only)."""
        from core.models.base import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        """Dispose of the connection pool on shutdown."""
        await self.engine.dispose()
        logger.info("Database connection pool disposed")


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_database(request: Request) -> Database:
    """Return the store handle attached to the running application."""
    return request.app.state.db


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session with automatic commit/rollback.

    Usage in FastAPI routes::

        @router.get("/items")
        async def list_items(session: AsyncSession = Depends(get_session)):
            result = await session.execute(select(Item))
            return result.scalars().all()
    """
    async with get_database(request).session() as session:
        yield session
