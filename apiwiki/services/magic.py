#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Redirect detection and built-in magic words.

Magic words are answered locally and take precedence over both the cache and
the remote wiki: ``{{CURRENTYEAR}}`` must never be fetched or stored.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional

from .names import MAIN, TEMPLATE, ParsedPageName


# -----------------------------------------------------------------------------
# Redirect detection
# -----------------------------------------------------------------------------

# Shortest text that can hold a redirect: len("#REDIRECT")
MIN_REDIRECT_LENGTH = 9

_REDIRECT_RE = re.compile(r"^\s*#REDIRECT\s*:?\s*\[\[([^\]]+)\]\]", re.IGNORECASE)


def parse_redirect_target(content: str) -> str | None:
    """Return the redirect target title if content is a redirect page, else None.

    Matches ``#REDIRECT [[Target Title]]`` on the first non-blank line.
    A ``|label`` part inside the link is ignored.
    """
    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        m = _REDIRECT_RE.match(line)
        if m:
            return m.group(1).split("|", 1)[0].strip() or None
        break  # first non-blank line not a redirect
    return None


# -----------------------------------------------------------------------------
# Magic words
# -----------------------------------------------------------------------------

class MagicWords:
    """
    Date and site variables.  *clock* returns the current UTC time and is
    replaceable for tests.
    """

    def __init__(
        self,
        site_name: str = "apiwiki",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.site_name = site_name
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self._words: dict[str, Callable[[datetime], str]] = {
            "CURRENTYEAR":      lambda now: f"{now.year}",
            "CURRENTMONTH":     lambda now: f"{now.month:02d}",
            "CURRENTMONTH1":    lambda now: f"{now.month}",
            "CURRENTMONTHNAME": lambda now: now.strftime("%B"),
            "CURRENTDAY":       lambda now: f"{now.day}",
            "CURRENTDAY2":      lambda now: f"{now.day:02d}",
            "CURRENTDAYNAME":   lambda now: now.strftime("%A"),
            "CURRENTTIME":      lambda now: now.strftime("%H:%M"),
            "CURRENTTIMESTAMP": lambda now: now.strftime("%Y%m%d%H%M%S"),
            "SITENAME":         lambda now: self.site_name,
            "!":                lambda now: "|",
        }

    def __contains__(self, name: str) -> bool:
        return name in self._words

    def resolve(self, page_name: ParsedPageName) -> Optional[str]:
        if page_name.namespace not in (MAIN, TEMPLATE):
            return None
        # case-sensitive: {{currentyear}} is an ordinary template
        word = self._words.get(page_name.title)
        if word is None:
            return None
        return word(self._clock())


# -----------------------------------------------------------------------------
