# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Alembic environment for the college database.

The target URL is COLLEGE_DB_URL when set, otherwise the URL built from the
DATABASE_* settings.

Usage:
    alembic upgrade head
    alembic upgrade head --sql
"""

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from collegeos.core.config import get_settings
from collegeos.infrastructure.database.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

COMPARE_OPTIONS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
    "compare_server_default": True,
}


def college_database_url() -> str:
    """URL of the college database to migrate."""
    return os.environ.get("COLLEGE_DB_URL") or get_settings().database.url


def _run(connection: Connection | None = None) -> None:
    if connection is None:
        context.configure(
            url=college_database_url(),
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
            **COMPARE_OPTIONS,
        )
    else:
        context.configure(connection=connection, **COMPARE_OPTIONS)

    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = college_database_url()
    engine = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    async with engine.connect() as connection:
        await connection.run_sync(_run)

    await engine.dispose()


if context.is_offline_mode():
    _run()
else:
    asyncio.run(_run_online())
