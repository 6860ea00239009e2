#!/usr/bin/env python
#
#
# ----------------------------------------------------------------------------
"""
ORM Models for apiwiki
======================

Tables
------
topics   — raw wikitext fetched from the remote wiki, keyed by full page name
images   — downloaded images, keyed by the image name used in wikitext

Rows are written once and never updated or deleted by the resolvers.
Timestamps stored in UTC.
"""
# ----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from apiwiki.core.database import Base


# ----------------------------------------------------------------------------

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# topics
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TopicRecord(Base):
    """
    Cached page text.  An empty ``content`` means the page was fetched and
    found empty, which is not the same as having no row at all.
    """
    __tablename__ = "topics"

    name:       Mapped[str]      = mapped_column(String(512), primary_key=True)
    content:    Mapped[str]      = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"TopicRecord(name={self.name!r}, {len(self.content or '')} chars)"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# images
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ImageRecord(Base):
    __tablename__ = "images"

    name:       Mapped[str]        = mapped_column(String(512), primary_key=True)
    url:        Mapped[str | None] = mapped_column(String(2048), nullable=True)
    filename:   Mapped[str]        = mapped_column(String(1024), nullable=False)
    created_at: Mapped[datetime]   = mapped_column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"ImageRecord(name={self.name!r}, filename={self.filename!r})"
