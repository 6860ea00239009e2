#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Image resolution
================
Turns an image reference into a local file and an image link.

A cached ``images`` row is only trusted while its file is still on disk; if
the file has been removed the image is looked up and downloaded again.  An
image the remote wiki does not know, or one that fails to download, simply
produces no link.  When the fresh copy lands under a different file name the
stale row is pointed at it, so the next lookup is a hit again.

Files live flat in ``ResolverConfig.image_directory``, named after the last
path segment of the remote URL.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import aiofiles.os
from sqlalchemy.exc import SQLAlchemyError

from apiwiki.core.config import ResolverConfig
from apiwiki.models import ImageRecord
from .image_format import ImageFormat
from .links import LinkEmitter, OutputBuffer
from .names import FILE, NameCodec
from .outcomes import Found, NotFound
from .remote import ImageInfo, MediaWikiClient
from .store import WikiDB


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

def file_uri(path: str | Path) -> str:
    return Path(path).resolve().as_uri()


# -----------------------------------------------------------------------------

class ImageResolver:

    def __init__(
        self,
        store: WikiDB,
        remote: MediaWikiClient,
        config: ResolverConfig,
        emitter: LinkEmitter | None = None,
    ) -> None:
        self.store = store
        self.remote = remote
        self.config = config
        self.emitter = emitter or LinkEmitter(config)
        self.codec: NameCodec = self.emitter.codec
        self.image_directory = Path(config.image_directory)
        self.image_directory.mkdir(parents=True, exist_ok=True)

    # ── public ────────────────────────────────────────────────────────────

    async def resolve_image(
        self,
        image_format: ImageFormat,
        href: str,
        output: OutputBuffer,
    ) -> Optional[Path]:
        """Emit a link for *image_format* into *output*; return the local file or None."""
        name = image_format.filename
        self.apply_default_thumb_width(image_format)

        record = await self._cached_image(name)
        if record is not None:
            if await aiofiles.os.path.exists(record.filename):
                log.debug("Cache hit for image %r", name)
                self.emitter.emit(output, href, file_uri(record.filename), image_format)
                return Path(record.filename)
            log.info("Cached file %s for image %r is gone, fetching again", record.filename, name)

        width = image_format.width if image_format.width > 0 else None
        outcome = await self.remote.fetch_image_info(f"{FILE.name}:{name}", width)
        if not isinstance(outcome, Found):
            if isinstance(outcome, NotFound):
                log.debug("Image %r does not exist on the remote wiki", name)
            return None
        info = outcome.value

        image_url = (info.thumb_url or info.url) if width else info.url
        path = self.image_directory / self.local_name(info, image_url)

        if not await aiofiles.os.path.exists(path):
            if image_url is None:
                log.warning("No download URL for image %r", name)
                return None
            downloaded = await self.remote.download_to(image_url, path)
            if not isinstance(downloaded, Found):
                return None

        if record is not None and record.filename != str(path):
            await self._repoint_image(record, image_url, str(path))
        else:
            await self._cache_image(name, image_url, str(path))
        self.emitter.emit(output, href, file_uri(path), image_format)
        return path

    # ── helpers ───────────────────────────────────────────────────────────

    def apply_default_thumb_width(self, image_format: ImageFormat) -> None:
        if image_format.is_thumbnail and image_format.width <= 0:
            image_format.width = self.config.default_thumb_width

    def local_name(self, info: ImageInfo, image_url: str | None) -> str:
        """Last segment of the remote URL, else the page title without its prefix."""
        name = info.title.split(":", 1)[-1]
        if image_url:
            url_path = urlsplit(image_url).path
            index = url_path.rfind("/")
            if index > 0 and url_path[index + 1:]:
                name = unquote(url_path[index + 1:])
        return self.codec.to_file_token(name)

    async def _cached_image(self, name: str) -> Optional[ImageRecord]:
        try:
            return await self.store.get_image(name)
        except SQLAlchemyError as exc:
            log.warning("Reading cached image %r failed: %s", name, exc)
            return None

    async def _cache_image(self, name: str, url: str | None, filename: str) -> None:
        try:
            await self.store.put_image_if_absent(name, url, filename)
        except SQLAlchemyError as exc:
            log.warning("Caching image %r failed: %s", name, exc)

    async def _repoint_image(self, record: ImageRecord, url: str | None, filename: str) -> None:
        try:
            moved = await self.store.repoint_image(record.name, record.filename, url, filename)
        except SQLAlchemyError as exc:
            log.warning("Updating cached image %r failed: %s", record.name, exc)
            return
        if moved:
            log.info("Image %r now cached at %s (was %s)", record.name, filename, record.filename)


# -----------------------------------------------------------------------------
