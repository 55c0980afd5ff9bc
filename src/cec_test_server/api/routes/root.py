from __future__ import annotations

from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root discovery endpoint listing what this server emulates."""
    return {
        "meta": {
            "title": "CEC Test Server",
            "description": "Local emulation of the Sites content delivery API.",
            "version": "0.1.0",
        },
        "links": {
            "self": "/",
            "items": "/content/published/api/v1.1/items",
            "queries": "/content/published/api/v1/items/queries",
            "assets": "/content/published/api/v1.1/assets",
            "templates": "/gettemplates",
            "health": "/health",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
