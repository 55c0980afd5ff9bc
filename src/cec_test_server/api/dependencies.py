from __future__ import annotations

from fastapi import Depends, Query, Request

from cec_test_server.config import Settings
from cec_test_server.core.context import RequestContext, SessionState
from cec_test_server.store import SourceTree


def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def get_source_tree(request: Request) -> SourceTree:
    tree: SourceTree = request.app.state.source_tree
    return tree


def get_session(request: Request) -> SessionState:
    session: SessionState = request.app.state.session
    return session


def get_request_context(
    template: str | None = Query(None),
    session: SessionState = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """Resolve which template or content export a content request reads from."""
    return RequestContext.build(template, session, settings.default_template)
