from __future__ import annotations

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "ok"


class TemplateRow(BaseModel):
    name: str
    type: str
