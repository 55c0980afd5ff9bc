"""Shared fixtures and helpers for tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from cec_test_server.store import ContentSet, SourceTree

_TESTS_ROOT = Path(__file__).parent

TEMPLATE = "BlogTemplate"
EXPORT = "EventsExport"

PNG_BYTES = b"\x89PNG\r\n\x1a\n-not-really-an-image"


# ---------------------------------------------------------------------------
# Auto-marker: everything under tests/unit is a unit test
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        rel = Path(str(item.fspath)).relative_to(_TESTS_ROOT)
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Sample toolkit project
# ---------------------------------------------------------------------------


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def news(item_id: str, name: str, language: str, updated: str, **extra: Any) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "id": item_id,
        "type": "News",
        "name": name,
        "language": language,
        "updatedDate": {"value": updated, "timezone": "UTC"},
    }
    doc.update(extra)
    return doc


def build_template_content(content_dir: Path) -> None:
    """Blog content: five News items, an author, a promo only reachable by slug, an image."""
    items = content_dir / "ContentItems"
    write_json(
        content_dir / "metadata.json",
        {
            "groups": 2,
            "group0": ["News:n1", "News:n2", "News:n3"],
            "group1": ["News:n1-fr", "News:n4-de", "Author:a1", "DigitalAsset:img1"],
        },
    )
    write_json(
        items / "News" / "n1.json",
        news(
            "n1",
            "Banana",
            "en-US",
            "2020-01-02T00:00:00.000Z",
            slug="banana",
            fields={
                "title": "Banana split",
                "rating": 3,
                "published": {"value": "2020-03-01T00:00:00Z", "timezone": "UTC"},
                "tags": ["fruit", "yellow"],
                "author": "a1",
            },
        ),
    )
    write_json(
        items / "News" / "n2.json",
        news(
            "n2",
            "Apple",
            "en-US",
            "2020-01-03T00:00:00.000Z",
            slug="apple",
            data={
                "title": "Apple pie",
                "rating": 5,
                "published": {"value": "2020-01-01T00:00:00Z", "timezone": "UTC"},
                "tags": ["fruit", "red"],
                "author": "a2",
            },
        ),
    )
    write_json(
        items / "News" / "n3.json",
        news(
            "n3",
            "Cherry",
            "fr-FR",
            "2020-01-01T00:00:00.000Z",
            fields={
                "title": "Cerise",
                "rating": 1,
                "published": {"value": "2020-02-01T00:00:00Z", "timezone": "UTC"},
                "tags": [],
                "author": "",
            },
        ),
    )
    write_json(
        items / "News" / "n1-fr.json",
        news("n1-fr", "Banane", "fr-FR", "2020-01-05T00:00:00.000Z", slug="banane", fields={"title": "Banane"}),
    )
    write_json(
        items / "News" / "n4-de.json",
        news("n4-de", "Apfel", "de-DE", "2020-01-04T00:00:00.000Z", slug="apfel", fields={"title": "Apfelkuchen"}),
    )
    write_json(
        items / "Author" / "a1.json",
        {"id": "a1", "type": "Author", "name": "Ann", "language": "en-US", "translatable": False, "fields": {}},
    )
    write_json(
        items / "Promo" / "p1.json",
        {"id": "p1", "type": "Promo", "name": "Summer", "slug": "summer-sale", "fields": {"discount": 20}},
    )
    write_json(
        items / "DigitalAsset" / "img1.json",
        {"id": "img1", "type": "DigitalAsset", "name": "photo.png", "fields": {"mimeType": "image/png"}},
    )
    asset = items / "DigitalAsset" / "files" / "img1" / "photo.png"
    asset.parent.mkdir(parents=True, exist_ok=True)
    asset.write_bytes(PNG_BYTES)

    # n1 owns its variation file; n2 is only listed in another item's file
    write_json(
        items / "VariationSets" / "n1.json",
        [
            {
                "items": [
                    {"id": "n1", "varType": "language", "value": "en-US"},
                    {"id": "n1-fr", "varType": "language", "value": "fr-FR"},
                ]
            }
        ],
    )
    write_json(
        items / "VariationSets" / "n4-de.json",
        [
            {
                "items": [
                    {"id": "n2", "varType": "language", "value": "en-US"},
                    {"id": "n4-de", "varType": "language", "value": "de-DE"},
                ]
            }
        ],
    )
    write_json(items / "_scs_theme_root_" / "marker.json", {"slug": "hidden", "id": "marker"})


def build_project(root: Path) -> Path:
    src = root / "src"
    template_dir = src / "templates" / TEMPLATE
    write_json(template_dir / "_folder.json", {"isEnterprise": "true"})
    (template_dir / "index.html").parent.mkdir(parents=True, exist_ok=True)
    (template_dir / "index.html").write_text("<html>blog</html>", encoding="utf-8")
    write_json(
        template_dir / "assets" / "contenttemplate" / "summary.json",
        {"contentTypeMappings": [{"type": "News", "categoryList": []}]},
    )
    build_template_content(template_dir / "assets" / "contenttemplate" / f"Content Template of {TEMPLATE}")

    write_json(src / "templates" / "Plain" / "_folder.json", {"isEnterprise": "false"})

    export_dir = src / "content" / EXPORT / "contentexport"
    write_json(export_dir / "metadata.json", {"groups": 1, "group0": ["Event:e1"]})
    write_json(
        export_dir / "ContentItems" / "Event" / "e1.json",
        {"id": "e1", "type": "Event", "name": "Launch", "fields": {"venue": "Hall"}},
    )

    component = src / "components" / "Gallery" / "assets" / "render.js"
    component.parent.mkdir(parents=True, exist_ok=True)
    component.write_text("define([], function () {});", encoding="utf-8")
    theme = src / "themes" / "BlogTheme" / "assets" / "css" / "main.css"
    theme.parent.mkdir(parents=True, exist_ok=True)
    theme.write_text("body { color: black; }", encoding="utf-8")
    return root


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    return build_project(tmp_path)


@pytest.fixture
def source_tree(project_dir: Path) -> SourceTree:
    return SourceTree(project_dir / "src")


@pytest.fixture
def content_set(source_tree: SourceTree) -> ContentSet:
    opened = source_tree.open(TEMPLATE)
    assert opened is not None
    return opened
