"""Async database engine and session management.

Provides async PostgreSQL connections via SQLModel and asyncpg. SQLite URLs
(``sqlite+aiosqlite://``) are accepted for tests and local runs.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Register the tables on SQLModel.metadata
from reviewdesk.db import models  # noqa: F401

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict[str, Any]:
    if url.startswith("sqlite"):
        # One shared connection so in-memory databases survive across sessions
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,  # Recycle stale connections after 1 hour
        "connect_args": {
            "timeout": 10,  # Connection timeout in seconds
            "command_timeout": 30,  # Query timeout in seconds
        },
    }


class Database:
    """Owns the async engine and session factory for one database URL.

    Constructed once at startup and injected into ``SqlDocumentStore``.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        if not url:
            msg = (
                "DATABASE__URL is not configured. "
                "Set it in your .env file or as an environment variable."
            )
            raise ValueError(msg)
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url, echo=echo, **_engine_options(url)
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Get an async database session.

        Yields a session that auto-commits on success and rolls back on error.
        Exceptions are logged before re-raising.

        Usage:
            async with database.session() as session:
                doc = await session.get(Document, document_id)
        """
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                logger.exception("Database session error, rolling back transaction")
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create every table that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Schema created on %s", self.engine.url.render_as_string())

    async def drop_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

    async def close(self) -> None:
        """Dispose of pooled connections.

        Call this on application shutdown (e.g., NiceGUI @app.on_shutdown).
        """
        await self.engine.dispose()
