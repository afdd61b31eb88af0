"""Database engine and session factory helpers.

Async SQLAlchemy setup for SQLite (dev) and PostgreSQL (prod), using
SQLAlchemy 2.0 async patterns. The engine is owned by the service
container, which disposes it at shutdown.

Examples:
    >>> engine = create_engine_for_url("sqlite+aiosqlite:///./assetvault.db")
    >>> await init_db(engine)  # Create tables
    >>> factory = create_session_factory(engine)
    >>> repository = SqlAssetRepository(factory)

Tests:
    - tests/unit/test_adapters/test_sql_repository.py
"""

from __future__ import annotations

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine configured for the database type.

    Note:
        For SQLite, enables WAL mode and foreign keys; in-memory SQLite
        shares one connection so every session sees the same tables.
        For PostgreSQL, configures connection pooling.
    """
    if url.startswith("sqlite"):
        if ":memory:" in url:
            engine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
            )

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    else:
        engine = create_async_engine(
            url,
            echo=echo,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
        )

    logger.info(f"Database engine created: {url.split('@')[-1]}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory used by repositories."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables. Call once at application startup."""
    from assetvault.repository.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")

