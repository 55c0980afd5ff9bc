import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cec_test_server.errors import ContentReadError
from cec_test_server.models import ContentItem, DigitalAsset, VariationSet
from cec_test_server.store.helpers import (
    CONTENT_ITEMS_DIR,
    DIGITAL_ASSET_TYPE,
    METADATA_FILE,
    SKIPPED_MARKERS,
    VARIATION_SETS_DIR,
    read_json,
)

logger = logging.getLogger(__name__)


def _walk_json_files(root: Path) -> list[Path]:
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != "files" and not any(m in d for m in SKIPPED_MARKERS))
        for name in sorted(filenames):
            if name.endswith(".json") and not any(m in name for m in SKIPPED_MARKERS):
                files.append(Path(dirpath) / name)
    return files


def _read_scanned(path: Path) -> Any:
    """Read a file met during a slug scan; undecodable files are skipped."""
    try:
        return read_json(path)
    except ContentReadError as exc:
        logger.warning("Skipping %s", exc)
        return None


class ContentSet:
    """Read-only view of one exported content set.

    Layout::

        <root>/metadata.json
        <root>/ContentItems/<type>/<id>.json
        <root>/ContentItems/<type>/files/<id>/<asset file>
        <root>/ContentItems/VariationSets/<id>.json

    Binary asset folders (``files/``) are not part of the item scan. Nothing is
    cached: every call goes back to the files.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    @property
    def items_dir(self) -> Path:
        return self.root / CONTENT_ITEMS_DIR

    @property
    def variations_dir(self) -> Path:
        return self.items_dir / VARIATION_SETS_DIR

    # -- type index ---------------------------------------------------------

    def type_of(self, item_id: str) -> str:
        """Return the item type recorded for *item_id* in ``metadata.json``, or ``""``."""
        metadata_file = self.root / METADATA_FILE
        if not metadata_file.is_file():
            logger.error("Content metadata %s does not exist", metadata_file)
            return ""
        metadata = read_json(metadata_file)
        if not isinstance(metadata, dict):
            raise ContentReadError(metadata_file, "expected a JSON object")
        try:
            groups = int(metadata.get("groups", 0))
        except (TypeError, ValueError):
            groups = 0
        for i in range(groups):
            for entry in metadata.get(f"group{i}") or []:
                parts = str(entry).split(":")
                if len(parts) > 1 and parts[1] == item_id:
                    return parts[0]
        return ""

    # -- items --------------------------------------------------------------

    def item_path(self, item_type: str, item_id: str) -> Path:
        return self.items_dir / item_type / f"{item_id}.json"

    def load_item(self, item_type: str, item_id: str) -> ContentItem | None:
        path = self.item_path(item_type, item_id)
        if not path.is_file():
            logger.info("Item file %s does not exist", path)
            return None
        return self._load_item_file(path)

    def _load_item_file(self, path: Path) -> ContentItem:
        document = read_json(path)
        if not isinstance(document, dict):
            raise ContentReadError(path, "expected a JSON object")
        return ContentItem.from_document(document)

    def list_items(self, item_type: str) -> list[ContentItem] | None:
        """All items of one type folder in directory order, ``None`` if the folder is missing."""
        type_dir = self.items_dir / item_type
        if not type_dir.is_dir():
            logger.error("Content item directory %s does not exist", type_dir)
            return None
        return [self._load_item_file(p) for p in sorted(type_dir.iterdir()) if p.is_file() and p.suffix == ".json"]

    def type_folders(self) -> list[Path]:
        if not self.items_dir.is_dir():
            return []
        return sorted(
            p for p in self.items_dir.iterdir() if p.is_dir() and not any(m in p.name for m in SKIPPED_MARKERS)
        )

    async def scan_item_files(self) -> list[Path]:
        """Recursively collect every JSON document under ``ContentItems``."""
        if not self.items_dir.is_dir():
            return []
        return await asyncio.to_thread(_walk_json_files, self.items_dir)

    async def find_item_by_slug(self, slug: str) -> ContentItem | None:
        """First document anywhere under ``ContentItems`` whose ``slug`` matches."""
        for path in await self.scan_item_files():
            document = _read_scanned(path)
            if isinstance(document, dict) and document.get("slug") == slug:
                return ContentItem.from_document(document)
        return None

    def find_by_slug(self, slug: str) -> list[ContentItem]:
        """All items with a matching slug, searching the type folders only."""
        matches: list[ContentItem] = []
        for folder in self.type_folders():
            if folder.name in (VARIATION_SETS_DIR, DIGITAL_ASSET_TYPE):
                continue
            for path in sorted(folder.iterdir()):
                if not path.is_file() or path.suffix != ".json":
                    continue
                document = _read_scanned(path)
                if isinstance(document, dict) and document.get("slug") == slug:
                    matches.append(ContentItem.from_document(document))
        return matches

    # -- variation sets -----------------------------------------------------

    def _read_variation_set(self, path: Path) -> VariationSet:
        raw: Any = read_json(path)
        if not isinstance(raw, list):
            raise ContentReadError(path, "expected a JSON array of variation groups")
        try:
            return VariationSet.model_validate({"groups": raw})
        except ValidationError as exc:
            raise ContentReadError(path, str(exc)) from exc

    def variation_set(self, item_id: str) -> VariationSet | None:
        path = self.variations_dir / f"{item_id}.json"
        if not path.is_file():
            return None
        return self._read_variation_set(path)

    def variation_set_files(self) -> list[Path]:
        if not self.variations_dir.is_dir():
            return []
        return sorted(p for p in self.variations_dir.iterdir() if p.is_file() and p.suffix == ".json")

    def read_variation_file(self, path: Path) -> VariationSet:
        return self._read_variation_set(path)

    # -- digital assets -----------------------------------------------------

    def has_asset(self, asset_id: str) -> bool:
        for folder in self.type_folders():
            if folder.name == VARIATION_SETS_DIR:
                continue
            if (folder / f"{asset_id}.json").is_file() and (folder / "files" / asset_id).exists():
                return True
        return False

    def digital_asset(self, asset_id: str) -> DigitalAsset | None:
        for folder in self.type_folders():
            if folder.name == VARIATION_SETS_DIR:
                continue
            json_file = folder / f"{asset_id}.json"
            if not json_file.is_file():
                continue
            item = self._load_item_file(json_file)
            asset_file = folder / "files" / asset_id / item.name if item.name else None
            if asset_file is None or not asset_file.is_file():
                logger.error("Digital asset file %s does not exist", asset_file)
                return None
            mime_type = item.fields.get("mimeType")
            logger.info("Asset mime type: %s file: %s", mime_type, asset_file)
            return DigitalAsset(
                id=asset_id,
                name=item.name,
                mime_type=str(mime_type) if mime_type else None,
                content=asset_file.read_bytes(),
            )
        logger.error("Digital asset %s does not exist", asset_id)
        return None
