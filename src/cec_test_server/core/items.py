"""Content REST operations answered from a local content set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from cec_test_server.core.evaluate import filter_items, sort_items
from cec_test_server.core.pagination import paginate, slug_envelope
from cec_test_server.core.ports.store import ContentSource
from cec_test_server.core.variations import resolve_variant
from cec_test_server.models import ContentItem, DigitalAsset, ParsedQuery

logger = logging.getLogger(__name__)

BULK_SENTINEL = "bulk"
_SLUG_PREFIX = ".by.slug/"
_LANGUAGE_SUFFIX = "/variations/language/"


@dataclass(frozen=True)
class ItemRequest:
    ids: list[str] = field(default_factory=list)
    language: str = ""
    bulk: bool = False


def parse_item_path(item_path: str, ids_param: str | None = None) -> ItemRequest:
    """Decode the part of an item URL that follows ``/items/``.

    ``<id>``, ``.by.slug/<slug>``, ``bulk`` (ids from the ``ids`` parameter),
    each optionally followed by ``/variations/language/<code>``.
    """
    language = ""
    marker = item_path.find(_LANGUAGE_SUFFIX)
    if marker > 0:
        language = item_path[marker + len(_LANGUAGE_SUFFIX) :]

    item_id = item_path.removeprefix(_SLUG_PREFIX)
    if item_id.find("/") > 0:
        item_id = item_id[: item_id.index("/")]

    if item_id == BULK_SENTINEL:
        ids = [i for i in (ids_param or "").split(",") if i]
        return ItemRequest(ids=ids, language=language, bulk=True)
    return ItemRequest(ids=[item_id], language=language)


def asset_id_from_path(asset_path: str) -> str:
    return asset_path.split("/", 1)[0]


def _load_by_id(source: ContentSource, item_id: str) -> ContentItem | None:
    item_type = source.type_of(item_id)
    if not item_type:
        logger.info("Item type not found for %s", item_id)
        return None
    return source.load_item(item_type, item_id)


def _items_by_ids(source: ContentSource, ids: list[str], keyed: bool) -> dict[str, Any]:
    found = [item for item in (_load_by_id(source, i) for i in ids) if item is not None]
    logger.info("Returned items: %d", len(found))
    if keyed:
        return {"items": {item.id: item.to_json() for item in found}}
    return {"items": [item.to_json() for item in found]}


def _items_by_types(source: ContentSource, query: ParsedQuery) -> list[ContentItem]:
    matched: list[ContentItem] = []
    for content_type in query.content_types:
        candidates = source.list_items(content_type)
        if candidates is None:
            continue
        matched.extend(filter_items(candidates, query))
    return sort_items(matched, query.order_by)


def query_items(source: ContentSource, query: ParsedQuery, keyed: bool = True) -> dict[str, Any] | None:
    """Answer a collection query.

    Explicit ids win over a slug, which wins over content types. ``keyed``
    selects the v1 id-keyed ``items`` map over the v1.1 list for id lookups.
    Returns ``None`` when the query names nothing to look up.
    """
    if query.ids:
        return _items_by_ids(source, query.ids, keyed)
    if query.slug:
        return slug_envelope(source.find_by_slug(query.slug)).model_dump()
    if query.content_types:
        items = _items_by_types(source, query)
        return paginate(items, query.offset, query.limit).model_dump()
    logger.info("No content item is specified, no item is returned")
    return None


async def get_items(source: ContentSource, request: ItemRequest) -> dict[str, Any] | None:
    """Fetch one item or a bulk set by id (or slug), honoring a requested language.

    Returns the item document, ``{"items": {id: item}}`` for bulk requests, or
    ``None`` when no id resolved to an item.
    """
    items: list[ContentItem] = []
    for item_id in request.ids:
        item_type = source.type_of(item_id)
        if item_type:
            item = source.load_item(item_type, item_id)
            if item is None:
                continue
            variant = resolve_variant(source, item, item_type, request.language)
            if variant is not None:
                items.append(variant)
        else:
            logger.info("Item type not found for %s, querying item with slug %s", item_id, item_id)
            by_slug = await source.find_item_by_slug(item_id)
            if by_slug is not None:
                items.append(by_slug)

    if not items:
        logger.info("No item found")
        return None
    logger.info("Returned item(s): %d", len(items))
    if request.bulk:
        return {"items": {item.id: item.to_json() for item in items}}
    return items[0].to_json()


def get_digital_asset(source: ContentSource, asset_id: str) -> DigitalAsset | None:
    return source.digital_asset(asset_id)
