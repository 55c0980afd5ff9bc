from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response

from cec_test_server.api.dependencies import get_session, get_source_tree
from cec_test_server.api.schemas import TemplateRow
from cec_test_server.core.context import SessionState
from cec_test_server.store import SourceTree

logger = logging.getLogger(__name__)

router = APIRouter(tags=["session"])


@router.get("/gettemplates", response_model=list[TemplateRow])
async def templates(tree: SourceTree = Depends(get_source_tree)) -> list[TemplateRow]:
    return [TemplateRow(name=t.name, type=t.type) for t in tree.templates()]


@router.post("/setcontentlayoutitem")
async def set_content_layout_item(
    template: str = Query(""),
    type: str = Query(""),
    id: str = Query(""),
    types: str = Query(""),
    session: SessionState = Depends(get_session),
) -> Response:
    """Select the content item a content layout is previewed with."""
    content_types = types.split(",") if types else []
    session.content_types = content_types
    if template and type and id:
        session.select_content_item(template, type, id, content_types)
        logger.info("Content layout item: %s (types: %s)", session.content_item, session.content_types)
    return Response(status_code=200)


@router.post("/clearcontentlayoutitem")
async def clear_content_layout_item(session: SessionState = Depends(get_session)) -> Response:
    session.clear_content_item()
    return Response(status_code=200)
