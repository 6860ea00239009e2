#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Cache store
===========
Read / insert-once access to the ``topics`` and ``images`` tables.

Each call opens its own short session and commits before returning, so a
record written by one request is immediately visible to every other one.
Inserts never overwrite: when two requests race on the same key the first
row wins and the second insert is a silent no-op.  The one update is
``repoint_image``, which moves an image row whose file has vanished to the
file that replaced it.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from apiwiki.models import ImageRecord, TopicRecord


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

def _insert_ignore(dialect: str, model: Any, values: dict):
    """``INSERT ... ON CONFLICT DO NOTHING`` for dialects that support it."""
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert as sqlite_insert
        return sqlite_insert(model).values(**values).on_conflict_do_nothing()
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert as pg_insert
        return pg_insert(model).values(**values).on_conflict_do_nothing()
    return None


# -----------------------------------------------------------------------------

class WikiDB:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ── topics ────────────────────────────────────────────────────────────

    async def get_topic(self, name: str) -> Optional[TopicRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(TopicRecord).where(TopicRecord.name == name)
            )
            return result.scalar_one_or_none()

    async def put_topic_if_absent(self, name: str, content: str) -> bool:
        return await self._insert_once(TopicRecord, {"name": name, "content": content})

    # ── images ────────────────────────────────────────────────────────────

    async def get_image(self, name: str) -> Optional[ImageRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(ImageRecord).where(ImageRecord.name == name)
            )
            return result.scalar_one_or_none()

    async def put_image_if_absent(self, name: str, url: str | None, filename: str) -> bool:
        return await self._insert_once(
            ImageRecord, {"name": name, "url": url, "filename": filename},
        )

    async def repoint_image(self, name: str, old_filename: str, url: str | None, filename: str) -> bool:
        """
        Move the image row for *name* to a re-downloaded file.

        Only a row that still points at *old_filename* is changed, so of two
        requests repairing the same stale row the first one wins.
        """
        async with self._session_factory() as session:
            result = await session.execute(
                update(ImageRecord)
                .where(ImageRecord.name == name, ImageRecord.filename == old_filename)
                .values(url=url, filename=filename)
            )
            await session.commit()
            return bool(result.rowcount)

    # ── helpers ───────────────────────────────────────────────────────────

    async def _insert_once(self, model: Any, values: dict) -> bool:
        """Insert a row unless the key already exists.  Returns True if written."""
        async with self._session_factory() as session:
            stmt = _insert_ignore(session.get_bind().dialect.name, model, values)
            try:
                if stmt is None:
                    stmt = insert(model).values(**values)
                result = await session.execute(stmt)
                await session.commit()
            except IntegrityError:
                await session.rollback()
                log.debug("%s %r already cached", model.__tablename__, values["name"])
                return False
            written = bool(result.rowcount)
            if not written:
                log.debug("%s %r already cached", model.__tablename__, values["name"])
            return written


# -----------------------------------------------------------------------------
