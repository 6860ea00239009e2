#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
APIWikiModel
============
The renderer-facing entry point.  Wires the cache store, the remote client
and the resolvers together from one immutable ResolverConfig.

The renderer calls

  get_raw_wiki_content(name, params)          while expanding {{templates}}
  parse_internal_image_link(ns, raw, output)  for every [[File:...]] link

and never learns whether an answer came from the cache or the remote wiki.
Each call without an explicit context starts a fresh ResolutionContext, so
concurrent renders never share a redirect counter.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional

from apiwiki.core.config import ResolverConfig
from .content import ContentResolver
from .image_format import ImageFormat
from .images import ImageResolver
from .links import LinkEmitter, OutputBuffer
from .magic import MagicWords
from .names import NameCodec, ParsedPageName, parse_page_name
from .recursion import ResolutionContext
from .remote import MediaWikiClient
from .store import WikiDB


# -----------------------------------------------------------------------------

class APIWikiModel:

    def __init__(
        self,
        store: WikiDB,
        remote: MediaWikiClient,
        config: ResolverConfig,
        magic_words: MagicWords | None = None,
    ) -> None:
        self.config = config
        self.codec = NameCodec(config.replace_colon)
        self.emitter = LinkEmitter(config, self.codec)
        self.content = ContentResolver(store, remote, config, magic_words)
        self.images = ImageResolver(store, remote, config, self.emitter)

    def new_context(self) -> ResolutionContext:
        return ResolutionContext(limit=self.config.recursion_limit)

    # ── templates ─────────────────────────────────────────────────────────

    async def get_raw_wiki_content(
        self,
        page_name: ParsedPageName | str,
        template_parameters: Optional[Mapping[str, str]] = None,
        context: ResolutionContext | None = None,
    ) -> Optional[str]:
        """
        Raw wikitext for *page_name*, or None.  A plain string is parsed with
        the template namespace as default, so ``"Foo"`` means ``Template:Foo``.
        """
        if isinstance(page_name, str):
            page_name = parse_page_name(page_name, self.content.redirect_namespace)
        return await self.content.resolve_content(
            page_name, context or self.new_context(), template_parameters,
        )

    async def get_redirected_wiki_content(
        self,
        raw_wikitext: str,
        template_parameters: Optional[Mapping[str, str]] = None,
        context: ResolutionContext | None = None,
    ) -> Optional[str]:
        return await self.content.follow_redirect(
            raw_wikitext, context or self.new_context(), template_parameters,
        )

    # ── images ────────────────────────────────────────────────────────────

    async def parse_internal_image_link(
        self,
        image_namespace: str,
        raw_image_link: str,
        output: OutputBuffer,
    ) -> Optional[Path]:
        """Resolve ``[[<image_namespace>:<raw_image_link>]]`` and append its link to *output*."""
        if self.config.image_base_url is None:
            return None
        image_format = ImageFormat.parse(raw_image_link, image_namespace)
        href = self.emitter.image_href(image_namespace, image_format.filename)
        return await self.append_internal_image_link(href, image_format, output)

    async def append_internal_image_link(
        self,
        href: str,
        image_format: ImageFormat,
        output: OutputBuffer,
    ) -> Optional[Path]:
        return await self.images.resolve_image(image_format, href, output)

    def image_src(self, path: Path) -> str | None:
        """Public URL of a cached image file, built from the image base URL."""
        return self.emitter.image_src(path.name)


# -----------------------------------------------------------------------------
