# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Engine and session lifecycle of the college database.

init_database() opens one pool per process and close_database() disposes of
it. Units of work take a session from get_session(), which commits when the
block exits cleanly and rolls back otherwise.
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from collegeos.infrastructure.database.models import Base

if TYPE_CHECKING:
    from collegeos.core.config.settings import DatabaseSettings, Settings

POOL_RECYCLE_SECONDS = 1800


class DatabaseError(Exception):
    """Storage failure, optionally wrapping the SQLAlchemy error behind it."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error is None:
            return self.message
        return f"{self.message}: {self.original_error}"


@dataclass
class CollegePool:
    """Engine of the college database and the sessionmaker bound to it."""

    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]


_pool: Optional[CollegePool] = None


def build_pool(database: "DatabaseSettings", echo: bool = False) -> CollegePool:
    """Create an engine and sessionmaker from database settings."""
    engine = create_async_engine(
        database.url,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        pool_pre_ping=True,
        pool_recycle=POOL_RECYCLE_SECONDS,
        echo=echo,
    )
    # Stores read attributes after commit, so instances must not expire
    maker = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return CollegePool(engine=engine, sessionmaker=maker)


async def init_database(settings: "Settings") -> None:
    """Open the process-wide pool. Call once at startup."""
    global _pool

    try:
        _pool = build_pool(settings.database, echo=settings.debug)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize database connection", e) from e


async def close_database() -> None:
    """Dispose of the pool opened by init_database(), if any."""
    global _pool

    pool, _pool = _pool, None
    if pool is not None:
        await pool.engine.dispose()


def _require_pool() -> CollegePool:
    if _pool is None:
        raise DatabaseError("Database not initialized. Call init_database() first.")
    return _pool


def get_engine() -> AsyncEngine:
    return _require_pool().engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return _require_pool().sessionmaker


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Session for one unit of work.

    SQLAlchemy errors raised in the block surface as DatabaseError, other
    exceptions propagate unchanged. Both roll the session back.
    """
    async with get_sessionmaker()() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


async def create_schema() -> None:
    """Create the college tables that are missing."""
    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create database schema", e) from e


async def check_database_connection() -> bool:
    """Whether the database answers a trivial query. False before init."""
    if _pool is None:
        return False

    try:
        async with _pool.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return False
    return True
