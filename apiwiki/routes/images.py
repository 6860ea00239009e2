#!/usr/bin/env python
#
#
# ----------------------------------------------------------------------------
"""
Images router
=============
GET /api/v1/images/{name}?spec=thumb|200px   — resolve (and download) an image
GET /api/v1/images/files/{token}             — serve a cached image file
"""
# ----------------------------------------------------------------------------

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse

from apiwiki.schemas import ImageResponse
from apiwiki.services.links import OutputBuffer
from apiwiki.services.names import FILE
from apiwiki.services.wiki_model import APIWikiModel
from .content import get_wiki_model


# ----------------------------------------------------------------------------

router = APIRouter(prefix="/images", tags=["images"])


# ── Serve ─────────────────────────────────────────────────────────────────────

@router.get("/files/{token}")
async def serve_image_file(
    token: str,
    model: APIWikiModel = Depends(get_wiki_model),
):
    if Path(token).name != token or token.startswith("."):
        raise HTTPException(status_code=404, detail="Not found")
    path = Path(model.config.image_directory) / token
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"Image file '{token}' not found")
    return FileResponse(path)


# ── Resolve ───────────────────────────────────────────────────────────────────

@router.get("/{name}", response_model=ImageResponse)
async def resolve_image(
    name: str,
    spec: str = Query(default="", max_length=1024),
    model: APIWikiModel = Depends(get_wiki_model),
):
    raw = f"{name}|{spec}" if spec else name
    output = OutputBuffer()
    path = await model.parse_internal_image_link(FILE.name, raw, output)
    if path is None or not output.links:
        raise HTTPException(status_code=404, detail=f"Image '{name}' could not be resolved")
    return {
        "name": output.links[-1].image_format.filename,
        "path": str(path),
        "src":  model.image_src(path),
        "html": output.to_html(model.config.allowed_attributes),
    }


# ----------------------------------------------------------------------------
