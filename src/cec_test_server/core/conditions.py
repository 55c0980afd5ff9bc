"""Parser for the content query parameters.

The ``q`` grammar is deliberately flat::

    clause ( " and " clause )*
    clause := comparison | comparison ( " or " comparison )+
    comparison := <field> " eq " "\"" <value> "\""

Grouping characters ``( ) { }`` are removed before a clause is split, so
nested boolean groups are not expressible: ``(a or b) and c`` is read as the
two clauses ``a or b`` and ``c``. Only ``eq`` is understood.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import unquote

from cec_test_server.models import FieldCondition, ParsedQuery

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0

_GROUPING_CHARS = "(){}"
_TYPE_EQUALS_PARAM = "field:type:equals"
_FIELD_PARAM_PREFIX = "field:"


@dataclass
class FilterConditions:
    ids: list[str] = field(default_factory=list)
    content_types: list[str] = field(default_factory=list)
    language: str = ""
    slug: str | None = None
    other_conditions: list[FieldCondition] = field(default_factory=list)

    def add_type(self, type_name: str) -> None:
        if type_name and type_name not in self.content_types:
            self.content_types.append(type_name)


def _unquote_value(value: str) -> str:
    return value.replace('"', "")


def _split_comparison(text: str) -> tuple[str, str] | None:
    parts = text.split(" eq ")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], _unquote_value(parts[1])


def _strip_grouping(clause: str) -> str:
    for ch in _GROUPING_CHARS:
        clause = clause.replace(ch, "")
    return clause.strip()


def _split_clauses(q: str) -> list[str]:
    return q.split(" and ") if q.find(" and ") > 0 else [q]


def parse_filter(q: str) -> FilterConditions:
    """Parse a ``q`` filter expression. Malformed clauses are logged and skipped."""
    conditions = FilterConditions()
    if not q:
        return conditions

    for raw_clause in _split_clauses(q):
        clause = _strip_grouping(raw_clause)

        if clause.find(" or ") > 0:
            for operand in clause.split(" or "):
                comparison = _split_comparison(operand.strip())
                if comparison is None:
                    logger.warning("Invalid query parameter: %s", operand)
                    continue
                name, value = comparison
                if name == "id":
                    conditions.ids.append(value)
                elif name == "type":
                    conditions.add_type(value)
                else:
                    logger.warning("Query not supported: %s", operand)
            continue

        comparison = _split_comparison(clause)
        if comparison is None:
            logger.warning("Invalid query parameter: %s", clause)
            continue
        name, value = comparison
        if name == "id":
            conditions.ids.append(value)
        elif name == "type":
            conditions.add_type(value)
        elif name == "language":
            conditions.language = value
        elif name == "slug":
            conditions.slug = value
        else:
            conditions.other_conditions.append(FieldCondition(field=name, value=value))

    return conditions


def _parse_int(params: Mapping[str, str], name: str, default: int) -> int:
    raw = params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s %r, using %d", name, raw, default)
        return default


def parse_query(params: Mapping[str, str]) -> ParsedQuery:
    """Build a ``ParsedQuery`` from already URL-decoded request parameters."""
    conditions = parse_filter(unquote(params.get("q", "")))

    content_types = list(conditions.content_types)
    for key in ("contentType", _TYPE_EQUALS_PARAM):
        value = params.get(key, "")
        if value and value not in content_types:
            content_types.append(value)

    field_filter: FieldCondition | None = None
    for key, value in params.items():
        if key.startswith(_FIELD_PARAM_PREFIX) and key != _TYPE_EQUALS_PARAM:
            field_filter = FieldCondition(field=key[len(_FIELD_PARAM_PREFIX) :], value=value)

    query = ParsedQuery(
        content_types=content_types,
        fields=params.get("fields", ""),
        field_filter=field_filter,
        order_by=unquote(params.get("orderBy", "")),
        limit=_parse_int(params, "limit", DEFAULT_LIMIT),
        offset=_parse_int(params, "offset", DEFAULT_OFFSET),
        default=unquote(params.get("default", "")).replace("*", ""),
        ids=conditions.ids,
        slug=conditions.slug,
        language=conditions.language,
        other_conditions=conditions.other_conditions,
    )
    logger.info(
        "Query: types=%s ids=%s slug=%s language=%s field=%s default=%r orderBy=%s limit=%d offset=%d other=%s",
        query.content_types,
        query.ids,
        query.slug,
        query.language,
        query.field_filter,
        query.default,
        query.order_by,
        query.limit,
        query.offset,
        query.other_conditions,
    )
    return query
