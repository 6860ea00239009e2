#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Template router
===============
GET /api/v1/templates/{name}   — resolved raw wikitext of a template
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from apiwiki.schemas import TemplateResponse
from apiwiki.services.names import parse_page_name
from apiwiki.services.wiki_model import APIWikiModel


# -----------------------------------------------------------------------------

router = APIRouter(prefix="/templates", tags=["templates"])


def get_wiki_model(request: Request) -> APIWikiModel:
    """FastAPI dependency returning the model built at startup."""
    return request.app.state.wiki_model


# -----------------------------------------------------------------------------

@router.get("/{name:path}", response_model=TemplateResponse)
async def get_template(
    name: str,
    model: APIWikiModel = Depends(get_wiki_model),
):
    page_name = parse_page_name(name, model.content.redirect_namespace)
    content = await model.get_raw_wiki_content(page_name)
    if content is None:
        raise HTTPException(status_code=404, detail=f"No content for '{page_name.full_name}'")
    return {"name": page_name.full_name, "content": content}


# -----------------------------------------------------------------------------
