"""Filtering and ordering of content items for collection queries."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any

from cec_test_server.models import ContentItem, FieldCondition, Multi, ParsedQuery, RichValue, Scalar

logger = logging.getLogger(__name__)

_FIELDS_PREFIX = "fields."
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _truthy(value: Any) -> bool:
    """JavaScript truthiness: empty mappings and lists count as present."""
    if value is None or value is False:
        return False
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _strip_fields_prefix(name: str) -> str:
    return name[len(_FIELDS_PREFIX) :] if name.startswith(_FIELDS_PREFIX) else name


def matches_condition(item: ContentItem, condition: FieldCondition) -> bool:
    name = _strip_fields_prefix(condition.field)
    if not _truthy(item.fields.get(name)):
        return False
    match item.values[name]:
        case Scalar(value=value):
            return isinstance(value, str) and value == condition.value
        case RichValue() | Multi() as nested:
            return any(isinstance(v, str) and v == condition.value for v in nested.own_values())
    return False


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in haystack.lower()


def matches_query(item: ContentItem, query: ParsedQuery) -> bool:
    if query.language and item.language and item.language != query.language:
        return False

    for condition in query.other_conditions:
        if not matches_condition(item, condition):
            return False

    field_filter = query.field_filter
    if field_filter is not None and field_filter.field and field_filter.value:
        value = item.fields.get(field_filter.field)
        if not isinstance(value, str) or not value or value != field_filter.value:
            return False
        return not query.default or _contains(value, query.default)

    return not query.default or _contains(item.serialized(), query.default)


def filter_items(items: Sequence[ContentItem], query: ParsedQuery) -> list[ContentItem]:
    return [item for item in items if matches_query(item, query)]


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds; naive values are taken as UTC."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _date_key(value: Any) -> datetime:
    return parse_date(value) or _EARLIEST


def _updated_date(item: ContentItem) -> Any:
    updated = item.document.get("updatedDate") or item.document.get("updateddate")
    if isinstance(updated, dict):
        return updated.get("value")
    return updated


def _rich_value(item: ContentItem, name: str) -> Any:
    value = item.values.get(name)
    return value.value if isinstance(value, RichValue) else None


def _relational_cmp(x: Any, y: Any) -> int:
    try:
        if x < y:
            return -1
        if x > y:
            return 1
    except TypeError:
        pass
    return 0


def _sort_by(items: list[ContentItem], key: Callable[[ContentItem], Any], descending: bool) -> list[ContentItem]:
    return sorted(items, key=key, reverse=descending)


def _sort_by_field(items: list[ContentItem], name: str, descending: bool) -> list[ContentItem]:
    first = items[0].values.get(name)
    if first is None:
        logger.warning("Item does not have field %s, order unchanged", name)
        return items

    match first:
        case RichValue():
            logger.info("Custom orderBy: field %s (date) order %s", name, "des" if descending else "asc")
            return _sort_by(items, lambda item: _date_key(_rich_value(item, name)), descending)
        case Scalar():
            logger.info("Custom orderBy: field %s (value) order %s", name, "des" if descending else "asc")
            sign = -1 if descending else 1

            def _cmp(a: ContentItem, b: ContentItem) -> int:
                return sign * _relational_cmp(a.fields.get(name), b.fields.get(name))

            return sorted(items, key=cmp_to_key(_cmp))
        case Multi():
            logger.warning("Field %s holds multiple values and cannot be ordered, order unchanged", name)
    return items


def sort_items(items: Sequence[ContentItem], order_by: str) -> list[ContentItem]:
    """Order items by ``name``, ``updateddate`` or ``fields.<name>``; anything else keeps input order."""
    result = list(items)
    if not order_by or not result:
        return result

    if order_by in ("name:asc", "name:des"):
        return _sort_by(result, lambda item: item.name, order_by == "name:des")

    if order_by in ("updateddate:asc", "updateddate:des"):
        return _sort_by(result, lambda item: _date_key(_updated_date(item)), order_by == "updateddate:des")

    if order_by.startswith(_FIELDS_PREFIX):
        name, _, direction = order_by[len(_FIELDS_PREFIX) :].partition(":")
        return _sort_by_field(result, name, direction == "des")

    logger.warning("Invalid orderBy %s, order unchanged", order_by)
    return result
