"""Content documents as read from a local content export."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

# --- Field values ---


@dataclass(frozen=True)
class Scalar:
    value: Any


@dataclass(frozen=True)
class RichValue:
    """A mapping carrying a ``value`` key, e.g. ``{"value": "2019-05-01T10:00:00Z", "timezone": "UTC"}``."""

    value: Any
    raw: dict[str, Any]

    def own_values(self) -> list[Any]:
        return list(self.raw.values())


@dataclass(frozen=True)
class Multi:
    """Any other nested mapping or list (multi-valued and reference fields)."""

    raw: dict[str, Any] | list[Any]

    def own_values(self) -> list[Any]:
        if isinstance(self.raw, dict):
            return list(self.raw.values())
        return list(self.raw)


FieldValue = Scalar | RichValue | Multi


def classify_field(raw: Any) -> FieldValue:
    if isinstance(raw, dict):
        if "value" in raw:
            return RichValue(value=raw["value"], raw=raw)
        return Multi(raw=raw)
    if isinstance(raw, list):
        return Multi(raw=raw)
    return Scalar(value=raw)


# --- Content items ---


@dataclass
class ContentItem:
    """One content item document.

    ``fields`` and ``data`` are synonyms in exported content. The raw
    document is reconciled at load time so both names refer to the same map,
    and the classified view in ``values`` is what evaluation and sorting use.
    """

    document: dict[str, Any]
    values: dict[str, FieldValue] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> ContentItem:
        doc = dict(document)
        data = doc.get("fields")
        if data is None:
            data = doc.get("data")
        if not isinstance(data, dict):
            data = {}
        doc["fields"] = data
        doc["data"] = data
        return cls(document=doc, values={k: classify_field(v) for k, v in data.items()})

    @property
    def id(self) -> str:
        return str(self.document.get("id", ""))

    @property
    def type(self) -> str:
        return str(self.document.get("type", ""))

    @property
    def name(self) -> str:
        value = self.document.get("name")
        return "" if value is None else str(value)

    @property
    def language(self) -> str | None:
        return self.document.get("language") or None

    @property
    def translatable(self) -> bool:
        return self.document.get("translatable") is not False

    @property
    def slug(self) -> str | None:
        return self.document.get("slug")

    @property
    def fields(self) -> dict[str, Any]:
        data: dict[str, Any] = self.document["fields"]
        return data

    def to_json(self) -> dict[str, Any]:
        """Wire form: both ``fields`` and ``data`` present and equal."""
        out = dict(self.document)
        out["fields"] = self.fields
        out["data"] = self.fields
        return out

    def serialized(self) -> str:
        return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class DigitalAsset:
    id: str
    name: str
    mime_type: str | None
    content: bytes


# --- Variation sets ---


class VariationEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    varType: str | None = None
    value: str | None = None


class VariationGroup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: list[VariationEntry] = []


class VariationSet(BaseModel):
    groups: list[VariationGroup]

    def entries(self) -> list[VariationEntry]:
        return [entry for group in self.groups for entry in group.items]

    def mentions(self, item_id: str) -> bool:
        return any(entry.id == item_id for entry in self.entries())

    def language_peer(self, item_id: str, language: str) -> VariationEntry | None:
        for entry in self.entries():
            if entry.id != item_id and entry.varType == "language" and entry.value == language:
                return entry
        return None


# --- Queries ---


@dataclass(frozen=True)
class FieldCondition:
    field: str
    value: str


@dataclass
class ParsedQuery:
    content_types: list[str] = field(default_factory=list)
    fields: str = ""
    field_filter: FieldCondition | None = None
    order_by: str = ""
    limit: int = 10
    offset: int = 0
    default: str = ""
    ids: list[str] = field(default_factory=list)
    slug: str | None = None
    language: str = ""
    other_conditions: list[FieldCondition] = field(default_factory=list)


class QueryEnvelope(BaseModel):
    """Collection query response.

    ``limit`` carries the total number of matches before pagination, not the
    requested page size. Existing clients read it that way.
    """

    hasMore: bool
    limit: int
    count: int
    items: list[dict[str, Any]]
    totalResults: int
    offset: int
