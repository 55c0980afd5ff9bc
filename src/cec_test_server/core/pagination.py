from __future__ import annotations

import logging
from collections.abc import Sequence

from cec_test_server.models import ContentItem, QueryEnvelope

logger = logging.getLogger(__name__)


def page_bounds(total: int, offset: int, limit: int) -> tuple[int, bool]:
    """Return ``(count, has_more)`` for a page starting at *offset* of at most *limit* items."""
    offset = max(offset, 0)
    count = min(max(total - offset, 0), max(limit, 0))
    return count, offset + count < total


def paginate(items: Sequence[ContentItem], offset: int, limit: int) -> QueryEnvelope:
    # negative offsets read from the start
    offset = max(offset, 0)
    total = len(items)
    count, has_more = page_bounds(total, offset, limit)
    page = list(items[offset : offset + count]) if offset < total else []
    if count < total:
        logger.info("Pagination: items %d - %d has more: %s", offset, offset + count - 1, has_more)
    else:
        logger.info("Returned items: %d", total)
    return QueryEnvelope(
        hasMore=has_more,
        limit=total,
        count=count,
        items=[item.to_json() for item in page],
        totalResults=total,
        offset=offset,
    )


def slug_envelope(items: Sequence[ContentItem]) -> QueryEnvelope:
    """Envelope for ``slug eq`` queries: every match, reported with ``count`` 0."""
    return QueryEnvelope(
        hasMore=False,
        limit=len(items),
        count=0,
        items=[item.to_json() for item in items],
        totalResults=len(items),
        offset=0,
    )
