"""Language variation lookup through ``VariationSets`` files."""

from __future__ import annotations

import logging

from cec_test_server.core.ports.store import ContentSource
from cec_test_server.models import ContentItem

logger = logging.getLogger(__name__)

LANGUAGE_VARIATION = "language"


def _direct_peer(
    source: ContentSource, item: ContentItem, item_type: str, language: str
) -> tuple[bool, ContentItem | None]:
    """Look in the item's own variation file. Returns ``(file_exists, peer)``."""
    variation_set = source.variation_set(item.id)
    if variation_set is None:
        return False, None
    for entry in variation_set.entries():
        if entry.id != item.id and entry.varType == LANGUAGE_VARIATION and entry.value == language:
            peer = source.load_item(item_type, entry.id)
            if peer is not None:
                logger.info("Found item in %s (direct variation set) id: %s", language, entry.id)
                return True, peer
    return True, None


def _cross_peer_id(source: ContentSource, item: ContentItem, language: str) -> str | None:
    """Scan every variation file for one that lists the item next to a peer in *language*."""
    for path in source.variation_set_files():
        variation_set = source.read_variation_file(path)
        if not variation_set.mentions(item.id):
            continue
        peer = variation_set.language_peer(item.id, language)
        if peer is not None:
            return peer.id
    return None


def resolve_variant(source: ContentSource, item: ContentItem, item_type: str, language: str) -> ContentItem | None:
    """Return the variant of *item* for *language*, or ``None`` if it has none.

    Items already in the requested language, or marked ``translatable: false``,
    are returned unchanged, as is every item when no language is requested.
    """
    if not language:
        return item
    if item.language == language:
        logger.info("Item %s language matched", item.id)
        return item
    if not item.translatable:
        logger.info("Item %s is not translatable", item.id)
        return item

    has_variation_file, peer = _direct_peer(source, item, item_type, language)
    if peer is not None:
        return peer

    # Peers only reference each other one way; fall back to scanning every set.
    if not has_variation_file:
        peer_id = _cross_peer_id(source, item, language)
        if peer_id is not None:
            logger.info("Found item in %s (cross variation set) id: %s", language, peer_id)
            return source.load_item(item_type, peer_id)

    logger.info("Item %s is not available in %s", item.id, language)
    return None
