# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Programmatic schema migrations for the college database.

Revisions are applied in the order of MIGRATIONS without the alembic CLI.
The alembic_version table is kept in sync, so `alembic upgrade head` and
this runner can be used on the same database.

Example:
    from collegeos.infrastructure.database.migrations.runner import run_migrations

    applied = await run_migrations()
"""

import importlib
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from types import ModuleType
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from collegeos.core.config import get_settings

logger = logging.getLogger(__name__)

VERSIONS_PACKAGE = "collegeos.infrastructure.database.migrations.versions"

# Revision modules of VERSIONS_PACKAGE, oldest first
MIGRATIONS = [
    "001_initial_schema",
]


@dataclass(frozen=True)
class MigrationStatus:
    """Schema version of a college database.

    Attributes:
        current_version: Last applied revision, None on a fresh database.
        pending: Revisions still to apply, oldest first.
    """

    current_version: str | None
    pending: list[str] = field(default_factory=list)

    @property
    def latest_version(self) -> str | None:
        """Newest known revision."""
        return MIGRATIONS[-1] if MIGRATIONS else None

    @property
    def is_up_to_date(self) -> bool:
        """Whether nothing is pending."""
        return not self.pending


def get_pending_migrations(
    current_version: str | None,
    target_revision: str | None = None,
) -> list[str]:
    """Select the revisions between the current and the target version.

    Args:
        current_version: Last applied revision, None if none.
        target_revision: Revision to stop at. Defaults to the newest.

    Returns:
        Revisions to apply in order. Empty when the current or target
        revision is not in MIGRATIONS.
    """
    start = 0
    if current_version is not None:
        if current_version not in MIGRATIONS:
            logger.warning("Unknown schema version %s, nothing applied", current_version)
            return []
        start = MIGRATIONS.index(current_version) + 1

    end = len(MIGRATIONS)
    if target_revision:
        if target_revision not in MIGRATIONS:
            logger.warning("Unknown target revision %s, nothing applied", target_revision)
            return []
        end = MIGRATIONS.index(target_revision) + 1

    return MIGRATIONS[start:end]


def load_migration(revision: str) -> ModuleType:
    """Import a revision module.

    Args:
        revision: Revision module name, e.g. "001_initial_schema".

    Returns:
        The revision module.

    Raises:
        ValueError: If the module defines no upgrade() function.
    """
    module = importlib.import_module(f"{VERSIONS_PACKAGE}.{revision}")
    if not callable(getattr(module, "upgrade", None)):
        raise ValueError(f"Migration {revision} has no upgrade() function")
    return module


async def get_migration_status(db_url: str | None = None) -> MigrationStatus:
    """Read the schema version of the college database.

    Args:
        db_url: Database URL. Defaults to the configured college database.

    Returns:
        Current version and pending revisions.
    """
    async with _migration_engine(db_url) as engine:
        return await _read_status(engine)


async def run_migrations(
    db_url: str | None = None,
    target_revision: str | None = None,
) -> list[str]:
    """Apply pending revisions to the college database.

    Each revision runs in its own transaction together with its version
    update, so a failing revision leaves the previous version recorded.

    Args:
        db_url: Database URL. Defaults to the configured college database.
        target_revision: Revision to stop at. Defaults to the newest.

    Returns:
        Applied revisions in order.
    """
    async with _migration_engine(db_url) as engine:
        status = await _read_status(engine, target_revision)
        if status.is_up_to_date:
            logger.info("College schema up to date at %s", status.current_version)
            return []

        for revision in status.pending:
            await _apply(engine, revision)
            logger.info("Applied migration %s", revision)

        return list(status.pending)


@asynccontextmanager
async def _migration_engine(db_url: str | None) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(db_url or get_settings().database.url, echo=False)
    try:
        async with engine.begin() as conn:
            await conn.execute(
                text(
                    "CREATE TABLE IF NOT EXISTS alembic_version ("
                    "version_num VARCHAR(128) NOT NULL, "
                    "CONSTRAINT alembic_version_pkc PRIMARY KEY (version_num))"
                )
            )
        yield engine
    finally:
        await engine.dispose()


async def _read_status(engine: AsyncEngine, target_revision: str | None = None) -> MigrationStatus:
    async with engine.connect() as conn:
        current = (
            await conn.execute(text("SELECT version_num FROM alembic_version LIMIT 1"))
        ).scalar_one_or_none()
    return MigrationStatus(
        current_version=current,
        pending=get_pending_migrations(current, target_revision),
    )


async def _apply(engine: AsyncEngine, revision: str) -> None:
    upgrade = load_migration(revision).upgrade

    async with engine.begin() as conn:
        await conn.run_sync(_upgrade_with_operations, upgrade)
        await conn.execute(text("DELETE FROM alembic_version"))
        await conn.execute(
            text("INSERT INTO alembic_version (version_num) VALUES (:version)"),
            {"version": revision},
        )


def _upgrade_with_operations(connection, upgrade) -> None:
    # alembic's op proxy must be bound to a migration context on a sync connection
    from alembic.operations import Operations
    from alembic.runtime.migration import MigrationContext

    context = MigrationContext.configure(connection)
    with Operations.context(context):
        upgrade()
