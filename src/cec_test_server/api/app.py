from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from cec_test_server.api.lifespan import lifespan
from cec_test_server.api.routes.content import router as content_router
from cec_test_server.api.routes.health import router as health_router
from cec_test_server.api.routes.root import router as root_router
from cec_test_server.api.routes.session import router as session_router
from cec_test_server.api.routes.templates import router as templates_router
from cec_test_server.config import Settings, load_settings
from cec_test_server.core.context import SessionState
from cec_test_server.errors import ContentReadError
from cec_test_server.store import SourceTree

logger = logging.getLogger(__name__)


async def _content_read_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s", exc)
    return JSONResponse({"detail": str(exc)}, status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    tree = SourceTree(settings.src_dir)

    app = FastAPI(
        title="CEC Test Server",
        description="Local emulation of the Sites content delivery API.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.source_tree = tree
    app.state.session = SessionState()

    app.add_exception_handler(ContentReadError, _content_read_error_handler)

    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)
    app.include_router(content_router)
    app.include_router(templates_router)
    app.include_router(session_router)

    # Plain static delivery of project sources
    for prefix, directory in (
        ("/src", tree.src_dir),
        ("/themes", tree.themes_dir),
        ("/main/themes", tree.themes_dir),
        ("/main/components", tree.components_dir),
    ):
        if directory.is_dir():
            app.mount(prefix, StaticFiles(directory=directory), name=prefix.strip("/").replace("/", "-"))
        else:
            logger.info("Static folder %s does not exist, %s is not served", directory, prefix)

    return app
