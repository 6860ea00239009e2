#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Remote wiki client
==================
Talks to a MediaWiki ``api.php`` endpoint over httpx.

  fetch_page_content  — action=query&prop=revisions&rvprop=content
  fetch_image_info    — action=query&prop=imageinfo&iiprop=url[&iiurlwidth=N]
  download_to         — streams a binary into a local file
  login               — action=login with a login token (skipped when no
                        credentials are configured)

None of the public calls raise for transport problems or for payloads of an
unexpected shape: they return a ``Found`` / ``NotFound`` / ``Failed``
outcome instead.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio
import contextlib
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urljoin

import aiofiles
import aiofiles.os
import httpx

from .outcomes import Failed, Found, NotFound, Outcome


log = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


# -----------------------------------------------------------------------------

class WikiAPIError(Exception):
    """The API answered with an ``error`` object or an unexpected payload."""


class LoginError(WikiAPIError):
    pass


@dataclass(frozen=True)
class ImageInfo:
    title: str
    url: Optional[str] = None
    thumb_url: Optional[str] = None
    description_url: Optional[str] = None


# -----------------------------------------------------------------------------

class MediaWikiClient:

    def __init__(
        self,
        api_url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 15.0,
        user_agent: str = "apiwiki",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self._username = username
        self._password = password
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )
        self._logged_in = False
        self._login_lock = asyncio.Lock()

    async def __aenter__(self) -> "MediaWikiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── session ───────────────────────────────────────────────────────────

    async def login(self) -> None:
        """Log in once per client.  Anonymous access when no username is set."""
        if self._logged_in:
            return
        async with self._login_lock:
            if self._logged_in:
                return
            if self._username:
                data = await self._query({"action": "query", "meta": "tokens", "type": "login"})
                query = _object(data.get("query", {}), "query")
                token = _object(query.get("tokens", {}), "tokens").get("logintoken")
                if not token:
                    raise LoginError("no login token in response")
                data = await self._post({
                    "action":     "login",
                    "lgname":     self._username,
                    "lgpassword": self._password or "",
                    "lgtoken":    token,
                })
                result = _object(data.get("login", {}), "login").get("result")
                if result != "Success":
                    raise LoginError(f"login as {self._username!r} failed: {result}")
                log.info("Logged in to %s as %s", self.api_url, self._username)
            self._logged_in = True

    # ── queries ───────────────────────────────────────────────────────────

    async def fetch_page_content(self, full_name: str) -> Outcome[str]:
        """Latest revision text of *full_name*."""
        try:
            await self.login()
            data = await self._query({
                "action":  "query",
                "prop":    "revisions",
                "rvprop":  "content",
                "rvslots": "main",
                "titles":  full_name,
            })
            page = _first_page(data)
            if page is None or page.get("missing") or page.get("invalid"):
                return NotFound()
            content = _revision_content(page)
        except (httpx.HTTPError, ValueError, WikiAPIError) as exc:
            log.warning("Fetching content of %r failed: %s", full_name, exc)
            return Failed(exc)

        if content is None:
            return NotFound()
        return Found(content)

    async def fetch_image_info(self, title: str, width: int | None = None) -> Outcome[ImageInfo]:
        """Original and (when *width* is given) thumbnail URL of the file page *title*."""
        params = {
            "action": "query",
            "prop":   "imageinfo",
            "iiprop": "url",
            "titles": title,
        }
        if width:
            params["iiurlwidth"] = str(width)
        try:
            await self.login()
            data = await self._query(params)
            page = _first_page(data)
            # Files on a shared repository come back as "missing" but still carry imageinfo
            info = _first_entry(page, "imageinfo") if page is not None else None
            if info is None:
                return NotFound()
            image = ImageInfo(
                title=_text(page.get("title", title), "title") or title,
                url=self._absolute(_text(info.get("url"), "url")),
                thumb_url=self._absolute(_text(info.get("thumburl"), "thumburl")),
                description_url=self._absolute(_text(info.get("descriptionurl"), "descriptionurl")),
            )
        except (httpx.HTTPError, ValueError, WikiAPIError) as exc:
            log.warning("Fetching image info for %r failed: %s", title, exc)
            return Failed(exc)
        return Found(image)

    # ── downloads ─────────────────────────────────────────────────────────

    async def download_to(self, url: str, path: Path) -> Outcome[Path]:
        """
        Stream *url* into *path*.

        Data goes to a uniquely named ``.part`` file next to *path* which is
        renamed into place only after the last chunk is written, so readers
        never see a half-written image and concurrent downloads of the same
        file cannot interleave.  The partial file is removed on failure.
        """
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.part")
        try:
            async with self._client.stream("GET", url) as resp:
                if resp.status_code == 404:
                    log.info("Image %s not found (404)", url)
                    return NotFound()
                resp.raise_for_status()
                async with aiofiles.open(tmp_path, "wb") as f:
                    async for chunk in resp.aiter_bytes(_CHUNK_SIZE):
                        await f.write(chunk)
            await aiofiles.os.replace(tmp_path, path)
        except (httpx.HTTPError, OSError) as exc:
            log.warning("Downloading %s to %s failed: %s", url, path, exc)
            return Failed(exc)
        finally:
            with contextlib.suppress(FileNotFoundError):
                await aiofiles.os.remove(tmp_path)
        return Found(path)

    # ── helpers ───────────────────────────────────────────────────────────

    def _absolute(self, url: str | None) -> str | None:
        return urljoin(self.api_url, url) if url else None

    async def _query(self, params: dict[str, str]) -> dict[str, Any]:
        resp = await self._client.get(self.api_url, params={**params, "format": "json", "formatversion": "2"})
        return _check(resp)

    async def _post(self, data: dict[str, str]) -> dict[str, Any]:
        resp = await self._client.post(self.api_url, data={**data, "format": "json", "formatversion": "2"})
        return _check(resp)


# -----------------------------------------------------------------------------

def _check(resp: httpx.Response) -> dict[str, Any]:
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise WikiAPIError("unexpected response payload")
    if "error" in data:
        err = data["error"]
        if isinstance(err, dict):
            raise WikiAPIError(f"{err.get('code')}: {err.get('info')}")
        raise WikiAPIError(str(err))
    return data


def _object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise WikiAPIError(f"malformed {what} in response")
    return value


def _text(value: Any, what: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise WikiAPIError(f"malformed {what} in response")
    return value


def _first_page(data: dict[str, Any]) -> Optional[dict[str, Any]]:
    pages = _object(data.get("query", {}), "query").get("pages") or []
    if isinstance(pages, dict):
        # formatversion=1 keys pages by id
        pages = list(pages.values())
    if not isinstance(pages, list):
        raise WikiAPIError("malformed pages in response")
    return _object(pages[0], "page") if pages else None


def _first_entry(page: dict[str, Any], key: str) -> Optional[dict[str, Any]]:
    entries = page.get(key) or []
    if not isinstance(entries, list):
        raise WikiAPIError(f"malformed {key} in response")
    return _object(entries[0], key) if entries else None


def _revision_content(page: dict[str, Any]) -> Optional[str]:
    rev = _first_entry(page, "revisions")
    if rev is None:
        return None
    slot = _object(_object(rev.get("slots", {}), "slots").get("main", {}), "main slot")
    return _text(slot.get("content", rev.get("content")), "content")


# -----------------------------------------------------------------------------
