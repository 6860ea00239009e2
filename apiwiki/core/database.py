#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Cache database
==============
One async engine per process, shared by the API and the prefetch script.

``init_db`` runs from the application lifespan; the getters build the engine
lazily so scripts do not have to.  SQLite gets a thread-agnostic connection,
any other backend a sized pool.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import get_settings


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

class Base(DeclarativeBase):
    """Declarative base for the cache tables."""


# -----------------------------------------------------------------------------

def engine_options(url: str) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` matching the backend of *url*."""
    if make_url(url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    settings = get_settings()
    return {
        "pool_size":     settings.db_pool_size,
        "max_overflow":  settings.db_max_overflow,
        "pool_pre_ping": True,
    }


@dataclass
class _CacheDatabase:
    engine: Optional[AsyncEngine] = None
    sessions: Optional[async_sessionmaker[AsyncSession]] = None


_db = _CacheDatabase()


# -----------------------------------------------------------------------------

def init_db(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    settings = get_settings()
    db_url = url or settings.database_url
    _db.engine = create_async_engine(
        db_url,
        echo=settings.db_echo if echo is None else echo,
        **engine_options(db_url),
    )
    _db.sessions = async_sessionmaker(_db.engine, class_=AsyncSession, expire_on_commit=False)
    log.info("Cache database %s", make_url(db_url).render_as_string(hide_password=True))
    return _db.engine


def get_engine() -> AsyncEngine:
    return _db.engine or init_db()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _db.sessions is None:
        init_db()
    return _db.sessions


async def create_all_tables() -> None:
    """CREATE TABLE IF NOT EXISTS for the cache tables; migrations live in alembic/."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    if _db.engine is not None:
        await _db.engine.dispose()
    _db.engine = None
    _db.sessions = None


# -----------------------------------------------------------------------------
