"""
Database Engine and Session Management

The engine owns a bounded connection pool: ``db_pool_size`` connections and
no overflow. Requests that cannot get a connection wait ``db_pool_timeout``
seconds and then fail.
"""

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from school_directory.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class Database:
    """Async engine plus session factory with an explicit lifecycle."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self.engine: AsyncEngine | None = None
        self.session_maker: async_sessionmaker[AsyncSession] | None = None

    async def connect(self) -> None:
        """Create the engine, verify connectivity and create missing tables."""
        self.engine = create_async_engine(
            self._settings.database_url,
            echo=self._settings.db_echo,
            pool_size=self._settings.db_pool_size,
            max_overflow=0,
            pool_timeout=self._settings.db_pool_timeout,
            pool_pre_ping=True,
        )
        self.session_maker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        # Import models so they are registered on Base.metadata
        from school_directory.modules.auth import models as _auth_models  # noqa: F401
        from school_directory.modules.schools import models as _school_models  # noqa: F401
        from school_directory.modules.users import models as _user_models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)

        logger.info(f"Database pool ready (size={self._settings.db_pool_size})")

    async def disconnect(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_maker = None

    def session(self) -> AsyncSession:
        if self.session_maker is None:
            raise RuntimeError("Database is not connected")
        return self.session_maker()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    FastAPI dependency yielding a session from the application's pool.

    Repositories commit explicitly; anything left uncommitted when the
    request fails is rolled back.
    """
    database: Database = request.app.state.services.database
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
