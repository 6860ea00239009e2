#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Template content resolution
===========================
Answers "what is the wikitext of Template:X?" for the renderer.

Order of lookup:
  1. built-in magic words
  2. the ``topics`` cache (a cached empty text counts as an answer)
  3. the remote wiki, whose answer is cached on first success

Redirect pages are followed with the request's ResolutionContext.  A chain
that runs past the configured depth, or that points at an invalid title,
resolves to a one-line error message instead of content.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from apiwiki.core.config import ResolverConfig
from .magic import MIN_REDIRECT_LENGTH, MagicWords, parse_redirect_target
from .names import TEMPLATE, Namespace, ParsedPageName, get_namespace, parse_page_name
from .outcomes import Failed, NotFound
from .recursion import RecursionGuard, ResolutionContext
from .remote import MediaWikiClient
from .store import WikiDB


log = logging.getLogger(__name__)

# Longest title echoed back in a redirect error message
_MAX_ERROR_TITLE = 255


# -----------------------------------------------------------------------------

def redirect_error(page_name: ParsedPageName) -> str:
    title = page_name.title[:_MAX_ERROR_TITLE]
    return f"Error - getting content of redirected link: {page_name.namespace}:{title}"


# -----------------------------------------------------------------------------

class ContentResolver:

    def __init__(
        self,
        store: WikiDB,
        remote: MediaWikiClient,
        config: ResolverConfig,
        magic_words: MagicWords | None = None,
    ) -> None:
        self.store = store
        self.remote = remote
        self.config = config
        self.magic_words = magic_words or MagicWords(config.site_name)
        self.redirect_namespace: Namespace = (
            get_namespace(config.template_namespaces[0]) if config.template_namespaces else None
        ) or TEMPLATE

    def is_template_namespace(self, namespace: Namespace) -> bool:
        return namespace.name in self.config.template_namespaces

    # ── public ────────────────────────────────────────────────────────────

    async def resolve_content(
        self,
        page_name: ParsedPageName,
        context: ResolutionContext,
        template_parameters: Optional[Mapping[str, str]] = None,
    ) -> Optional[str]:
        """Return the raw text for *page_name*, or None if there is none."""
        builtin = self.magic_words.resolve(page_name)
        if builtin is not None:
            return builtin

        if not self.is_template_namespace(page_name.namespace):
            return None

        full_name = page_name.full_name
        content = await self._cached_content(full_name)
        if content is None:
            outcome = await self.remote.fetch_page_content(full_name)
            if isinstance(outcome, Failed):
                log.warning("No content for %r: %s", full_name, outcome.message)
                return None
            if isinstance(outcome, NotFound):
                log.debug("%r does not exist on the remote wiki", full_name)
                return None
            content = outcome.value
            if content:
                await self._cache_content(full_name, content)

        content = await self.follow_redirect(content, context, template_parameters)
        return content or None

    async def follow_redirect(
        self,
        content: str,
        context: ResolutionContext,
        template_parameters: Optional[Mapping[str, str]] = None,
    ) -> Optional[str]:
        """Return *content*, or the content of its redirect target."""
        if len(content) < MIN_REDIRECT_LENGTH:
            return content
        target = parse_redirect_target(content)
        if target is None:
            return content

        page_name = parse_page_name(target, self.redirect_namespace)
        with RecursionGuard.scope(context) as depth:
            if depth > context.limit or not page_name.valid:
                log.info("Giving up on redirect to %r at depth %d", target, depth)
                return redirect_error(page_name)
            return await self.resolve_content(page_name, context, template_parameters)

    # ── cache ─────────────────────────────────────────────────────────────

    async def _cached_content(self, full_name: str) -> Optional[str]:
        try:
            record = await self.store.get_topic(full_name)
        except SQLAlchemyError as exc:
            log.warning("Reading cached %r failed: %s", full_name, exc)
            return None
        if record is None:
            log.debug("Cache miss for %r", full_name)
            return None
        log.debug("Cache hit for %r", full_name)
        return record.content or ""

    async def _cache_content(self, full_name: str, content: str) -> None:
        try:
            await self.store.put_topic_if_absent(full_name, content)
        except SQLAlchemyError as exc:
            log.warning("Caching %r failed: %s", full_name, exc)


# -----------------------------------------------------------------------------
