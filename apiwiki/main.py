#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
apiwiki — FastAPI application factory
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from apiwiki.core.config import get_settings
from apiwiki.core.database import create_all_tables, dispose_engine, get_session_factory, init_db
from apiwiki.routes import content, images
from apiwiki.schemas import HealthResponse
from apiwiki.services.remote import MediaWikiClient
from apiwiki.services.store import WikiDB
from apiwiki.services.wiki_model import APIWikiModel


log = logging.getLogger(__name__)


# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    settings = get_settings()
    init_db()
    await create_all_tables()   # safe: CREATE TABLE IF NOT EXISTS

    remote = MediaWikiClient(
        settings.wiki_api_url,
        username=settings.wiki_username,
        password=settings.wiki_password,
        timeout=settings.fetch_timeout,
        user_agent=settings.user_agent,
    )
    app.state.wiki_model = APIWikiModel(
        WikiDB(get_session_factory()),
        remote,
        settings.resolver_config(),
    )
    log.info("Resolving against %s, images in %s", settings.wiki_api_url, settings.image_directory)
    try:
        yield
    finally:
        await remote.aclose()
        await dispose_engine()


# -----------------------------------------------------------------------------

def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Template and image resolution backed by a remote MediaWiki API.",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # ── API routers ───────────────────────────────────────────────────────

    prefix = "/api/v1"

    app.include_router(content.router, prefix=prefix)
    app.include_router(images.router,  prefix=prefix)

    # ── Global exception handlers ─────────────────────────────────────────

    @app.exception_handler(500)
    async def server_error(request: Request, exc):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    # ── Health check ──────────────────────────────────────────────────────

    @app.get("/api/health", tags=["system"], response_model=HealthResponse)
    async def health():
        return {"status": "ok", "version": settings.app_version, "app": settings.app_name}

    return app


# -----------------------------------------------------------------------------

app = create_app()


# -----------------------------------------------------------------------------
