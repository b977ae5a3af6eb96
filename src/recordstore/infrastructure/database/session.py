"""
Database Connection Factory
Creates the async engine and hands out connections for RecordStores to borrow
"""
from __future__ import annotations

import contextlib
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from recordstore.config import Settings, get_settings
from recordstore.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)


class DatabaseSessionFactory:
    """
    Factory for async engines, connections and sessions.

    The record store itself never opens or closes connections; this is the
    caller-side helper that owns them.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ) -> None:
        """
        Initialize factory with a database connection string.

        Args:
            database_url: PostgreSQL connection string (asyncpg)
            echo: Whether to log SQL statements
            pool_size: Connection pool size
            max_overflow: Max overflow connections beyond pool_size
        """
        self.database_url = database_url
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
        )
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database session factory initialized", pool_size=pool_size, max_overflow=max_overflow)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DatabaseSessionFactory":
        settings = settings or get_settings()
        if not settings.async_database_url:
            raise ValueError("RECORDSTORE_DATABASE_URL is not configured")
        return cls(
            settings.async_database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    @contextlib.asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """
        Connection inside a transaction; committed on success, rolled back on error.

        Usage:
            async with factory.connect() as conn:
                store = RecordStore(conn, "items", Item.from_row, Item.to_row)
        """
        async with self.engine.begin() as conn:
            yield conn

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error("Session error, rolled back", error=str(e))
                raise

    async def dispose(self) -> None:
        """Close all connections and dispose of the engine."""
        await self.engine.dispose()
        logger.info("Database engine disposed")
