#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Image link options.

Parses the inside of ``[[File:name.png|thumb|200px|right|Caption]]``.
Size forms: ``200px``  ``x150px``  ``300x200px``  ``200x0px``.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from .names import get_namespace, normalize_title


_SIZE_RE = re.compile(r'^(?:(\d+)x(\d+)|(\d+)x|x(\d+)|(\d+))\s*px$', re.IGNORECASE)

_TYPES = {
    "thumb": "thumb", "thumbnail": "thumb",
    "frame": "frame", "framed": "frame",
    "frameless": "frameless",
    "border": "border",
}
_LOCATIONS = {"left": "left", "right": "right", "center": "center", "centre": "center", "none": "none"}
_VALIGN = {"baseline", "sub", "super", "top", "text-top", "middle", "bottom", "text-bottom"}


# -----------------------------------------------------------------------------

@dataclass
class ImageFormat:
    filename: str
    namespace: str = "File"
    width: int = -1
    height: int = -1
    type: Optional[str] = None
    location: Optional[str] = None
    alt: Optional[str] = None
    link: Optional[str] = None
    caption: Optional[str] = None

    @property
    def is_thumbnail(self) -> bool:
        return self.type in ("thumb", "frame")

    @classmethod
    def parse(cls, raw: str, namespace: str = "File") -> "ImageFormat":
        parts = [p.strip() for p in raw.split("|")]
        name = parts[0]
        if ":" in name:
            prefix, rest = name.split(":", 1)
            if get_namespace(prefix) is not None:
                name = rest
        fmt = cls(filename=normalize_title(name).replace(" ", "_"), namespace=namespace)

        for part in parts[1:]:
            key = part.lower()
            sm = _SIZE_RE.match(part)
            if sm:
                width  = sm.group(1) or sm.group(3) or sm.group(5)
                height = sm.group(2) or sm.group(4)
                fmt.width  = int(width)  if width  else -1
                fmt.height = int(height) if height else -1
            elif key in _TYPES:
                fmt.type = _TYPES[key]
            elif key in _LOCATIONS:
                fmt.location = _LOCATIONS[key]
            elif key in _VALIGN or key.startswith("upright"):
                continue
            elif key.startswith("alt="):
                fmt.alt = part[4:].strip()
            elif key.startswith("link="):
                fmt.link = part[5:].strip()
            elif part:
                fmt.caption = part
        return fmt


# -----------------------------------------------------------------------------
