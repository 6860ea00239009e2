#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Migrations for the apiwiki cache tables.

The URL comes from apiwiki Settings (DATABASE_URL or .env) rather than
alembic.ini, and online runs go through the same async drivers as the app.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from apiwiki.core.config import get_settings
from apiwiki.core.database import Base
from apiwiki.models import ImageRecord, TopicRecord  # noqa: F401


if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

DATABASE_URL = get_settings().database_url

_options = {"target_metadata": Base.metadata, "compare_type": True}


# -----------------------------------------------------------------------------

def emit_sql() -> None:
    """``alembic upgrade --sql``: write the DDL instead of running it."""
    context.configure(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_options,
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection) -> None:
    context.configure(connection=connection, **_options)
    with context.begin_transaction():
        context.run_migrations()


async def migrate() -> None:
    engine = create_async_engine(DATABASE_URL, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


# -----------------------------------------------------------------------------

if context.is_offline_mode():
    emit_sql()
else:
    asyncio.run(migrate())
