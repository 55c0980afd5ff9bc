import logging
from dataclasses import dataclass
from pathlib import Path

from cec_test_server.store.content_set import ContentSet
from cec_test_server.store.helpers import export_content_dir, read_json, template_content_dir

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateInfo:
    name: str
    type: str


class SourceTree:
    """The ``src`` folder of a toolkit project: templates, content exports, themes, components."""

    def __init__(self, src_dir: str | Path) -> None:
        self.src_dir = Path(src_dir)

    @property
    def templates_dir(self) -> Path:
        return self.src_dir / "templates"

    @property
    def content_dir(self) -> Path:
        return self.src_dir / "content"

    @property
    def themes_dir(self) -> Path:
        return self.src_dir / "themes"

    @property
    def components_dir(self) -> Path:
        return self.src_dir / "components"

    def resolve_content_dir(self, name: str) -> Path | None:
        """Locate the content set for a template or standalone content export."""
        if not name:
            return None
        for candidate in (template_content_dir(self.templates_dir, name), export_content_dir(self.content_dir, name)):
            if candidate.is_dir():
                return candidate
        logger.error("Content directory for %s does not exist", name)
        return None

    def open(self, name: str) -> ContentSet | None:
        content_dir = self.resolve_content_dir(name)
        return ContentSet(content_dir) if content_dir is not None else None

    def template_names(self) -> list[str]:
        if not self.templates_dir.is_dir():
            return []
        return sorted(p.name for p in self.templates_dir.iterdir() if p.is_dir())

    def templates(self) -> list[TemplateInfo]:
        templates: list[TemplateInfo] = []
        for name in self.template_names():
            folder_json = self.templates_dir / name / "_folder.json"
            if not folder_json.is_file():
                continue
            data = read_json(folder_json)
            is_enterprise = isinstance(data, dict) and data.get("isEnterprise") == "true"
            templates.append(TemplateInfo(name=name, type="Enterprise" if is_enterprise else "Standard"))
        if not templates:
            logger.warning("No templates found in %s", self.templates_dir)
        return templates

    def find_asset_template(self, asset_id: str) -> str | None:
        """Name of the first template whose content holds digital asset *asset_id*."""
        for name in self.template_names():
            content_dir = template_content_dir(self.templates_dir, name)
            if content_dir.is_dir() and ContentSet(content_dir).has_asset(asset_id):
                logger.info("Digital asset %s is from template %s", asset_id, name)
                return name
        logger.warning("Digital asset %s does not belong to any template", asset_id)
        return None

    def content_layout_mappings(self, template: str) -> list[object] | None:
        """Category/type layout mappings from the template's ``summary.json``."""
        summary = self.templates_dir / template / "assets" / "contenttemplate" / "summary.json"
        if not summary.is_file():
            return None
        data = read_json(summary)
        if not isinstance(data, dict):
            return None
        mappings = data.get("categoryLayoutMappings") or data.get("contentTypeMappings") or []
        return list(mappings) if mappings else None
