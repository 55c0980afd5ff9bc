"""Tests for collection queries and item fetches against the sample content."""

from typing import Any

import pytest

from cec_test_server.core.conditions import parse_query
from cec_test_server.core.items import (
    ItemRequest,
    asset_id_from_path,
    get_digital_asset,
    get_items,
    parse_item_path,
    query_items,
)
from cec_test_server.store import ContentSet
from tests.conftest import PNG_BYTES


def _query(content_set: ContentSet, keyed: bool = True, **params: str) -> dict[str, Any] | None:
    return query_items(content_set, parse_query(params), keyed=keyed)


def _ids(payload: dict[str, Any] | None) -> list[str]:
    assert payload is not None
    return [item["id"] for item in payload["items"]]


class TestQueryItems:
    def test_type_query_sorted_and_paged(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "News"', orderBy="name:asc", limit="2", offset="1")
        assert payload is not None
        assert _ids(payload) == ["n2", "n1"]
        assert payload["count"] == 2
        assert payload["hasMore"] is True
        assert payload["limit"] == 5
        assert payload["totalResults"] == 5
        assert payload["offset"] == 1

    def test_default_page(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "News"')
        assert _ids(payload) == ["n1-fr", "n1", "n2", "n3", "n4-de"]

    def test_language_filter(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='(type eq "News" and language eq "en-US")')
        assert _ids(payload) == ["n1", "n2"]

    def test_sort_by_updated_date(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "News"', orderBy="updateddate:des")
        assert _ids(payload) == ["n1-fr", "n4-de", "n2", "n1", "n3"]

    def test_sort_by_date_field(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "News" and language eq "en-US"', orderBy="fields.published:asc")
        assert _ids(payload) == ["n2", "n1"]

    def test_sort_by_numeric_field(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "News" and language eq "en-US"', orderBy="fields.rating:des")
        assert _ids(payload) == ["n2", "n1"]

    def test_field_condition_on_list(self, content_set: ContentSet) -> None:
        assert _ids(_query(content_set, q='type eq "News" and tags eq "red"')) == ["n2"]

    def test_field_condition_on_reference(self, content_set: ContentSet) -> None:
        assert _ids(_query(content_set, q='type eq "News" and author eq "a1"')) == ["n1"]

    def test_field_equals_parameter(self, content_set: ContentSet) -> None:
        payload = _query(content_set, contentType="News", **{"field:title": "Apple pie"})
        assert _ids(payload) == ["n2"]

    def test_free_text(self, content_set: ContentSet) -> None:
        assert _ids(_query(content_set, contentType="News", default="*yellow*")) == ["n1"]

    def test_several_types(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "Author" or type eq "Promo"')
        assert _ids(payload) == ["a1", "p1"]

    def test_unknown_type_is_empty(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='type eq "Nope"')
        assert payload is not None
        assert payload["items"] == []
        assert payload["totalResults"] == 0

    def test_ids_keyed(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='id eq "n1" or id eq "a1" or id eq "zzz"')
        assert payload is not None
        assert list(payload["items"]) == ["n1", "a1"]
        assert payload["items"]["n1"]["name"] == "Banana"
        assert "count" not in payload

    def test_ids_as_list(self, content_set: ContentSet) -> None:
        payload = _query(content_set, keyed=False, q='id eq "n2" or id eq "n1"')
        assert _ids(payload) == ["n2", "n1"]

    def test_ids_win_over_types(self, content_set: ContentSet) -> None:
        payload = _query(content_set, keyed=False, q='id eq "a1" and type eq "News"')
        assert _ids(payload) == ["a1"]

    def test_slug(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='slug eq "banana"')
        assert payload is not None
        assert _ids(payload) == ["n1"]
        assert payload["count"] == 0
        assert payload["totalResults"] == 1

    def test_nothing_to_look_up(self, content_set: ContentSet) -> None:
        assert _query(content_set) is None
        assert _query(content_set, q='title eq "x"') is None

    def test_items_carry_data(self, content_set: ContentSet) -> None:
        payload = _query(content_set, q='id eq "n2"')
        assert payload is not None
        item = payload["items"]["n2"]
        assert item["fields"] == item["data"]
        assert item["fields"]["title"] == "Apple pie"


class TestParseItemPath:
    def test_plain_id(self) -> None:
        assert parse_item_path("n1") == ItemRequest(ids=["n1"])

    def test_trailing_segments_are_dropped(self) -> None:
        assert parse_item_path("n1/extra") == ItemRequest(ids=["n1"])

    def test_slug_with_language(self) -> None:
        assert parse_item_path(".by.slug/banana/variations/language/fr-FR") == ItemRequest(
            ids=["banana"], language="fr-FR"
        )

    def test_bulk(self) -> None:
        assert parse_item_path("bulk", "a,,b") == ItemRequest(ids=["a", "b"], bulk=True)
        assert parse_item_path("bulk") == ItemRequest(ids=[], bulk=True)

    def test_asset_id(self) -> None:
        assert asset_id_from_path("img1/photo.png") == "img1"
        assert asset_id_from_path("img1") == "img1"


class TestGetItems:
    @pytest.mark.asyncio
    async def test_single_item(self, content_set: ContentSet) -> None:
        payload = await get_items(content_set, parse_item_path("n1"))
        assert payload is not None
        assert payload["id"] == "n1"
        assert payload["data"] == payload["fields"]

    @pytest.mark.asyncio
    async def test_language_variation(self, content_set: ContentSet) -> None:
        payload = await get_items(content_set, parse_item_path("n1/variations/language/fr-FR"))
        assert payload is not None
        assert (payload["id"], payload["language"]) == ("n1-fr", "fr-FR")

    @pytest.mark.asyncio
    async def test_missing_language_variation(self, content_set: ContentSet) -> None:
        assert await get_items(content_set, parse_item_path("n1/variations/language/de-DE")) is None

    @pytest.mark.asyncio
    async def test_slug_fallback(self, content_set: ContentSet) -> None:
        payload = await get_items(content_set, parse_item_path(".by.slug/summer-sale"))
        assert payload is not None
        assert payload["id"] == "p1"

    @pytest.mark.asyncio
    async def test_slug_fallback_tolerates_malformed_files(self, content_set: ContentSet) -> None:
        (content_set.items_dir / "News" / "broken.json").write_text("{not json", encoding="utf-8")
        payload = await get_items(content_set, parse_item_path(".by.slug/summer-sale"))
        assert payload is not None
        assert payload["id"] == "p1"

    @pytest.mark.asyncio
    async def test_unknown_item(self, content_set: ContentSet) -> None:
        assert await get_items(content_set, parse_item_path("zzz")) is None

    @pytest.mark.asyncio
    async def test_bulk(self, content_set: ContentSet) -> None:
        payload = await get_items(content_set, parse_item_path("bulk", "n1,n2,zzz"))
        assert payload is not None
        assert list(payload["items"]) == ["n1", "n2"]

    @pytest.mark.asyncio
    async def test_bulk_with_language(self, content_set: ContentSet) -> None:
        payload = await get_items(content_set, parse_item_path("bulk/variations/language/de-DE", "n1,n2"))
        assert payload is not None
        assert list(payload["items"]) == ["n4-de"]

    @pytest.mark.asyncio
    async def test_empty_bulk(self, content_set: ContentSet) -> None:
        assert await get_items(content_set, parse_item_path("bulk")) is None


def test_get_digital_asset(content_set: ContentSet) -> None:
    asset = get_digital_asset(content_set, "img1")
    assert asset is not None
    assert asset.content == PNG_BYTES
