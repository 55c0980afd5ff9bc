"""Local emulation of the published content REST API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from cec_test_server.api.dependencies import get_request_context, get_source_tree
from cec_test_server.core.conditions import parse_query
from cec_test_server.core.context import RequestContext
from cec_test_server.core.items import (
    asset_id_from_path,
    get_digital_asset,
    get_items,
    parse_item_path,
    query_items,
)
from cec_test_server.store import ContentSet, SourceTree

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/content/published/api", tags=["content"])


def _empty() -> Response:
    return Response(status_code=200)


def _open_content_set(tree: SourceTree, template: str) -> ContentSet | None:
    if not template:
        logger.error("No template is specified, cannot render")
        return None
    return tree.open(template)


@router.get("/v1/items/queries")
@router.get("/v1/items")
@router.get("/v1.1/items")
async def items_query(
    request: Request,
    tree: SourceTree = Depends(get_source_tree),
    ctx: RequestContext = Depends(get_request_context),
) -> Response:
    """Collection query (content list and search components)."""
    logger.info("Content query: %s", request.url)
    content_set = _open_content_set(tree, ctx.template)
    if content_set is None:
        return _empty()

    query = parse_query(request.query_params)
    payload = query_items(content_set, query, keyed="/v1.1/" not in request.url.path)
    if payload is None:
        return _empty()
    return JSONResponse(payload)


@router.get("/v1/items/{item_path:path}")
@router.get("/v1.1/items/{item_path:path}")
async def item(
    item_path: str,
    ids: str | None = Query(None),
    tree: SourceTree = Depends(get_source_tree),
    ctx: RequestContext = Depends(get_request_context),
) -> Response:
    """Single item, slug, or ``bulk`` fetch with optional language variation."""
    logger.info("Content item: %s", item_path)
    content_set = _open_content_set(tree, ctx.template)
    if content_set is None:
        return _empty()

    payload = await get_items(content_set, parse_item_path(item_path, ids))
    if payload is None:
        return _empty()
    return JSONResponse(payload)


@router.get("/v1/digital-assets/{asset_path:path}")
@router.get("/v1.1/assets/{asset_path:path}")
async def digital_asset(
    asset_path: str,
    tree: SourceTree = Depends(get_source_tree),
    ctx: RequestContext = Depends(get_request_context),
) -> Response:
    """Raw bytes of a digital asset."""
    asset_id = asset_id_from_path(asset_path)
    template = ctx.template or tree.find_asset_template(asset_id) or ""
    content_set = _open_content_set(tree, template)
    if content_set is None:
        return _empty()

    asset = get_digital_asset(content_set, asset_id)
    if asset is None:
        return _empty()
    return Response(content=asset.content, media_type=asset.mime_type)
