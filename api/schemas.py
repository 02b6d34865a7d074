"""
schemas.py — request/response models of the HTTP service.
Kept apart from contracts.py so the API can evolve on its own.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from contracts import Frame


# ─────────────────────────── /frames ─────────────────────────────

class FramesRequest(BaseModel):
    message: Optional[str] = None
    stack: Optional[str] = None
    offline: Optional[bool] = None        # None = Settings.offline
    function_name: Optional[str] = None   # keep only frames with this name


class FramesResponse(BaseModel):
    stack: list[Frame]
    dialect: Optional[str] = None


# ─────────────────────────── /frames/report ──────────────────────

class ReportRequest(BaseModel):
    url: Optional[str] = None             # None = Settings.report_url
    frames: list[Frame]
    message: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)


class ReportResponse(BaseModel):
    url: str
    body: str


# ─────────────────────────── /health ─────────────────────────────

class HealthResponse(BaseModel):
    status: str
    version: str
    offline: bool
