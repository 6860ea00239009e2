#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Image link output.

Builds the href / src pair for an image reference from the configured URL
templates (``${title}`` in the link base URL, ``${image}`` in the image base
URL) and appends finished links to the renderer's output buffer.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import html as _html
from dataclasses import dataclass, field
from typing import Iterator

from apiwiki.core.config import ResolverConfig
from .image_format import ImageFormat
from .names import NameCodec


# -----------------------------------------------------------------------------

@dataclass
class ImageLink:
    href: str
    src: str
    image_format: ImageFormat

    def to_html(self, allowed_attributes: frozenset[str] | set[str]) -> str:
        fmt = self.image_format

        def _tag(name: str, attrs: dict[str, str | None], void: bool = False) -> str:
            rendered = "".join(
                f' {k}="{_html.escape(v, quote=True)}"'
                for k, v in attrs.items()
                if v is not None and k in allowed_attributes
            )
            return f"<{name}{rendered} />" if void else f"<{name}{rendered}>"

        img_class = "thumbimage" if fmt.is_thumbnail else (
            f"location-{fmt.location}" if fmt.location else None
        )
        img = _tag("img", {
            "src":    self.src,
            "alt":    fmt.alt if fmt.alt is not None else (fmt.caption or fmt.filename),
            "width":  str(fmt.width)  if fmt.width  > 0 else None,
            "height": str(fmt.height) if fmt.height > 0 else None,
            "class":  img_class,
        }, void=True)
        anchor = _tag("a", {"href": self.href, "class": "image", "title": fmt.caption}) + img + "</a>"
        if not fmt.is_thumbnail:
            return anchor

        side = {"left": "tleft", "center": "tnone", "none": "tnone"}.get(fmt.location or "", "tright")
        inner_style = f"width:{fmt.width + 2}px;" if fmt.width > 0 else None
        parts = [
            _tag("div", {"class": f"thumb {side}"}),
            _tag("div", {"class": "thumbinner", "style": inner_style}),
            anchor,
        ]
        if fmt.caption:
            parts.append(_tag("div", {"class": "thumbcaption"}) + _html.escape(fmt.caption) + "</div>")
        parts.append("</div></div>")
        return "".join(parts)


# -----------------------------------------------------------------------------

@dataclass
class OutputBuffer:
    """The slice of render output this layer appends image links to."""

    links: list[ImageLink] = field(default_factory=list)

    def append(self, link: ImageLink) -> None:
        self.links.append(link)

    def __iter__(self) -> Iterator[ImageLink]:
        return iter(self.links)

    def __len__(self) -> int:
        return len(self.links)

    def to_html(self, allowed_attributes: frozenset[str] | set[str]) -> str:
        return "".join(link.to_html(allowed_attributes) for link in self.links)


# -----------------------------------------------------------------------------

class LinkEmitter:

    def __init__(self, config: ResolverConfig, codec: NameCodec | None = None) -> None:
        self.config = config
        self.codec = codec or NameCodec(config.replace_colon)

    def image_href(self, namespace: str, filename: str) -> str:
        token = self.codec.join(namespace, self.codec.to_url_token(filename))
        return self.config.link_base_url.replace("${title}", token)

    def image_src(self, filename: str) -> str | None:
        if self.config.image_base_url is None:
            return None
        return self.config.image_base_url.replace("${image}", self.codec.to_url_token(filename))

    def emit(self, output: OutputBuffer, href: str, src: str, image_format: ImageFormat) -> ImageLink:
        link = ImageLink(href=href, src=src, image_format=image_format)
        output.append(link)
        return link


# -----------------------------------------------------------------------------
