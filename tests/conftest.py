#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Pytest fixtures for apiwiki tests.

The cache lives in a throwaway SQLite file per test and the remote wiki is
an in-process fake served through httpx.MockTransport, so no network or
external services are needed.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import json
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from apiwiki.core.config import ResolverConfig
from apiwiki.core.database import Base
from apiwiki.main import create_app
from apiwiki.routes.content import get_wiki_model
from apiwiki.services.remote import MediaWikiClient
from apiwiki.services.store import WikiDB
from apiwiki.services.wiki_model import APIWikiModel


# -----------------------------------------------------------------------------

API_URL = "https://wiki.test/w/api.php"


# -----------------------------------------------------------------------------
# Fake MediaWiki API
# -----------------------------------------------------------------------------

class FakeWiki:
    """
    Minimal stand-in for api.php plus an upload server.

    pages   : full page name -> wikitext
    images  : "File:Name" -> {"url": ..., "thumburl": ...}
    files   : absolute URL -> bytes
    """

    def __init__(self) -> None:
        self.pages: dict[str, str] = {}
        self.images: dict[str, dict[str, str]] = {}
        self.files: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: Exception | None = None
        self.status_code = 200
        self.accounts: dict[str, str] = {}
        self.logins = 0

    # ── inspection helpers ────────────────────────────────────────────────

    def api_calls(self, prop: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.params.get("prop") == prop]

    def content_fetches(self, title: str | None = None) -> int:
        return len([
            r for r in self.api_calls("revisions")
            if title is None or r.url.params.get("titles") == title
        ])

    def downloads(self) -> list[str]:
        return [str(r.url) for r in self.requests if r.url.path != "/w/api.php"]

    # ── transport ─────────────────────────────────────────────────────────

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream error")

        if request.url.path != "/w/api.php":
            data = self.files.get(str(request.url))
            if data is None:
                return httpx.Response(404, text="no such file")
            return httpx.Response(200, content=data, headers={"Content-Type": "image/png"})

        if request.method == "POST":
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            return self._login(form)

        params = request.url.params
        if params.get("meta") == "tokens":
            return httpx.Response(200, json={"query": {"tokens": {"logintoken": "abc+\\"}}})
        if params.get("prop") == "revisions":
            return self._revisions(params["titles"])
        if params.get("prop") == "imageinfo":
            return self._imageinfo(params["titles"], params.get("iiurlwidth"))
        return httpx.Response(200, json={"error": {"code": "badvalue", "info": "unknown action"}})

    def _login(self, form: dict[str, str]) -> httpx.Response:
        ok = self.accounts.get(form.get("lgname", "")) == form.get("lgpassword")
        if ok:
            self.logins += 1
        return httpx.Response(200, json={"login": {"result": "Success" if ok else "Failed"}})

    def _revisions(self, title: str) -> httpx.Response:
        if title not in self.pages:
            page = {"ns": 10, "title": title, "missing": True}
        else:
            page = {
                "ns": 10,
                "title": title,
                "revisions": [{"slots": {"main": {"contentmodel": "wikitext", "content": self.pages[title]}}}],
            }
        return httpx.Response(200, content=json.dumps({"query": {"pages": [page]}}).encode())

    def _imageinfo(self, title: str, width: str | None) -> httpx.Response:
        entry = self.images.get(title)
        if entry is None:
            page = {"ns": 6, "title": title, "missing": True, "imagerepository": ""}
        else:
            info = {"url": entry["url"], "descriptionurl": f"https://wiki.test/wiki/{title}"}
            if width and "thumburl" in entry:
                info["thumburl"] = entry["thumburl"]
            page = {"ns": 6, "title": title, "imagerepository": "local", "imageinfo": [info]}
        return httpx.Response(200, json={"query": {"pages": [page]}})


# -----------------------------------------------------------------------------
# Database
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'cache.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def store(db_session_factory):
    return WikiDB(db_session_factory)


# -----------------------------------------------------------------------------
# Remote wiki + model
# -----------------------------------------------------------------------------

@pytest.fixture
def fake_wiki() -> FakeWiki:
    return FakeWiki()


@pytest_asyncio.fixture(scope="function")
async def remote(fake_wiki):
    client = MediaWikiClient(API_URL, transport=httpx.MockTransport(fake_wiki.handler))
    yield client
    await client.aclose()


@pytest.fixture
def config(tmp_path) -> ResolverConfig:
    return ResolverConfig(image_directory=tmp_path / "images", recursion_limit=5)


@pytest_asyncio.fixture(scope="function")
async def model(store, remote, config):
    return APIWikiModel(store, remote, config)


@pytest_asyncio.fixture(scope="function")
async def client(model):
    """HTTP test client wired to the test model."""
    app = create_app()
    app.dependency_overrides[get_wiki_model] = lambda: model

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -----------------------------------------------------------------------------
