#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Page names
==========
Namespaces, page-name parsing and the codec that turns a page name into
a cache key, a URL token and a filesystem token.

Namespace table follows the MediaWiki defaults:

    -2 Media   -1 Special   0 (main)   1 Talk   2 User   4 Project
     6 File (alias Image)   8 MediaWiki   10 Template   12 Help   14 Category
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote


# -----------------------------------------------------------------------------
# Namespaces
# -----------------------------------------------------------------------------

MEDIA_NAMESPACE_KEY     = -2
SPECIAL_NAMESPACE_KEY   = -1
MAIN_NAMESPACE_KEY      = 0
TALK_NAMESPACE_KEY      = 1
USER_NAMESPACE_KEY      = 2
PROJECT_NAMESPACE_KEY   = 4
FILE_NAMESPACE_KEY      = 6
MEDIAWIKI_NAMESPACE_KEY = 8
TEMPLATE_NAMESPACE_KEY  = 10
HELP_NAMESPACE_KEY      = 12
CATEGORY_NAMESPACE_KEY  = 14


@dataclass(frozen=True)
class Namespace:
    code: int
    name: str
    aliases: tuple[str, ...] = ()

    def make_full_pagename(self, title: str) -> str:
        return canonicalize(self.name, title)

    def __str__(self) -> str:
        return self.name


MAIN     = Namespace(MAIN_NAMESPACE_KEY, "")
MEDIA    = Namespace(MEDIA_NAMESPACE_KEY, "Media")
SPECIAL  = Namespace(SPECIAL_NAMESPACE_KEY, "Special")
TALK     = Namespace(TALK_NAMESPACE_KEY, "Talk")
USER     = Namespace(USER_NAMESPACE_KEY, "User")
PROJECT  = Namespace(PROJECT_NAMESPACE_KEY, "Project", ("Wikipedia",))
FILE     = Namespace(FILE_NAMESPACE_KEY, "File", ("Image",))
MEDIAWIKI = Namespace(MEDIAWIKI_NAMESPACE_KEY, "MediaWiki")
TEMPLATE = Namespace(TEMPLATE_NAMESPACE_KEY, "Template")
HELP     = Namespace(HELP_NAMESPACE_KEY, "Help")
CATEGORY = Namespace(CATEGORY_NAMESPACE_KEY, "Category")

NAMESPACES: tuple[Namespace, ...] = (
    MEDIA, SPECIAL, MAIN, TALK, USER, PROJECT, FILE, MEDIAWIKI, TEMPLATE, HELP, CATEGORY,
)

_BY_NAME: dict[str, Namespace] = {}
for _ns in NAMESPACES:
    for _label in (_ns.name, *_ns.aliases):
        if _label:
            _BY_NAME[_label.lower()] = _ns


def get_namespace(name: str) -> Optional[Namespace]:
    """Return the namespace called *name* (case-insensitive, ``_`` == space), or None."""
    key = re.sub(r"[\s_]+", " ", name).strip().lower()
    return _BY_NAME.get(key)


# -----------------------------------------------------------------------------
# Titles
# -----------------------------------------------------------------------------

_INVALID_TITLE_RE = re.compile(r"[#<>\[\]|{}\x00-\x1f\x7f]")


def normalize_title(title: str) -> str:
    """Underscores to spaces, collapse whitespace, upper-case the first letter."""
    title = re.sub(r"[\s_]+", " ", title).strip()
    return title[:1].upper() + title[1:]


def canonicalize(namespace: str, title: str) -> str:
    """``Namespace:Title`` cache key; an empty namespace yields the title unchanged."""
    title = normalize_title(title)
    if not namespace:
        return title
    return f"{namespace}:{title}"


@dataclass(frozen=True)
class ParsedPageName:
    namespace: Namespace
    title: str
    valid: bool = True

    @property
    def full_name(self) -> str:
        return self.namespace.make_full_pagename(self.title)

    def __str__(self) -> str:
        return f"{self.namespace}:{self.title}"


def parse_page_name(text: str, default_namespace: Namespace = MAIN) -> ParsedPageName:
    """
    Split *text* into namespace and title.

    ``Prefix:Title`` with a known prefix selects that namespace; a leading ``:``
    selects the main namespace unless a known prefix follows it; anything else
    lands in *default_namespace*.  A ``#fragment`` is dropped.
    """
    text = text.strip()
    if "#" in text:
        text = text.split("#", 1)[0]

    force_main = text.startswith(":")
    if force_main:
        text = text[1:].lstrip()

    namespace = MAIN if force_main else default_namespace
    if ":" in text:
        prefix, rest = text.split(":", 1)
        ns = get_namespace(prefix)
        if ns is not None:
            namespace = ns
            text = rest

    title = normalize_title(text)
    valid = bool(title) and not _INVALID_TITLE_RE.search(title)
    return ParsedPageName(namespace, title, valid)


# -----------------------------------------------------------------------------
# Codec
# -----------------------------------------------------------------------------

_URL_SAFE  = "_.~!*'(),:-"
_FILE_SAFE = "_.~!'(),-"


class NameCodec:
    """
    Encodes names for links and local files.

    ``replace_colon`` selects whether the namespace separator in generated
    links is ``/`` (path style) or ``:``.  The same codec must build both the
    href and the src of one image link.
    """

    def __init__(self, replace_colon: bool = False) -> None:
        self.replace_colon = replace_colon

    @staticmethod
    def canonicalize(namespace: str, title: str) -> str:
        return canonicalize(namespace, title)

    @staticmethod
    def to_url_token(name: str) -> str:
        return quote(name.strip().replace(" ", "_"), safe=_URL_SAFE)

    @staticmethod
    def to_file_token(name: str) -> str:
        return quote(name.strip().replace(" ", "_"), safe=_FILE_SAFE)

    @property
    def separator(self) -> str:
        return "/" if self.replace_colon else ":"

    def join(self, prefix: str, token: str) -> str:
        if not prefix:
            return token
        return f"{prefix}{self.separator}{token}"


# -----------------------------------------------------------------------------
