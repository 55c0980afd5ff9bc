import json
from pathlib import Path
from typing import Any

from cec_test_server.errors import ContentReadError

CONTENT_ITEMS_DIR = "ContentItems"
VARIATION_SETS_DIR = "VariationSets"
DIGITAL_ASSET_TYPE = "DigitalAsset"
METADATA_FILE = "metadata.json"

# Export bookkeeping folders that never hold content items
SKIPPED_MARKERS = ("_scs_theme_root_", "_scs_design_name_")


def read_json(path: Path) -> Any:
    """Read a JSON file, raising ``ContentReadError`` if it does not decode."""
    try:
        return json.loads(path.read_bytes())
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ContentReadError(path, str(exc)) from exc


def template_content_dir(templates_dir: Path, name: str) -> Path:
    return templates_dir / name / "assets" / "contenttemplate" / f"Content Template of {name}"


def export_content_dir(content_dir: Path, name: str) -> Path:
    return content_dir / name / "contentexport"
