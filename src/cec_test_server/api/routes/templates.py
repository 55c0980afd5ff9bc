"""Template delivery: files of the template being previewed and the components/themes it pulls in."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from cec_test_server.api.dependencies import get_session, get_source_tree
from cec_test_server.core.context import SessionState
from cec_test_server.store import SourceTree

logger = logging.getLogger(__name__)

router = APIRouter(tags=["templates"])

_COMPONENT_DELIVERY = "/_compdelivery/"
_THEME_DELIVERY = "/_themesdelivery/"
_LAYOUT_MAPPING_FILE = "caas_contenttypemap.json"


def safe_join(base: Path, relative: str) -> Path | None:
    """Join *relative* onto *base*, refusing paths that escape it."""
    base = base.resolve()
    target = (base / relative).resolve()
    if target != base and base not in target.parents:
        return None
    return target


def _delivery_target(suffix: str, marker: str, base: Path) -> Path | None:
    rest = suffix[suffix.index(marker) + len(marker) :]
    name, _, file_path = rest.partition("/")
    if not name or not file_path:
        return None
    return safe_join(base / name, file_path)


def _file_or_404(path: Path | None) -> Response:
    if path is None or not path.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(path)


@router.get("/templates/{template_path:path}")
async def template_file(
    template_path: str,
    tree: SourceTree = Depends(get_source_tree),
    session: SessionState = Depends(get_session),
) -> Response:
    suffix = unquote(template_path).strip("/")
    if not suffix:
        return RedirectResponse("/gettemplates")

    template = suffix.split("/", 1)[0]
    # content requests that follow read from this template
    session.select_template(template)
    logger.info("Template: %s", suffix)

    if suffix.find(_COMPONENT_DELIVERY) > 0:
        return _file_or_404(_delivery_target(suffix, _COMPONENT_DELIVERY, tree.components_dir))
    if suffix.find(_THEME_DELIVERY) > 0:
        return _file_or_404(_delivery_target(suffix, _THEME_DELIVERY, tree.themes_dir))
    if _LAYOUT_MAPPING_FILE in suffix:
        mappings = tree.content_layout_mappings(template)
        if mappings:
            logger.info("Content layout mapping from summary.json of %s", template)
            return JSONResponse(mappings)
        path = safe_join(tree.templates_dir, suffix)
        if path is not None and path.is_file():
            return FileResponse(path)
        logger.info("No content layout mapping found")
        return JSONResponse([])
    return _file_or_404(safe_join(tree.templates_dir, suffix))
