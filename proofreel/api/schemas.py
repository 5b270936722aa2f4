"""
Pydantic schemas for API requests and responses.
"""
from pydantic import BaseModel, Field
from datetime import datetime


class HealthResponse(BaseModel):
    """GET /health response."""
    status: str = Field(..., description="healthy | degraded")
    service: str
    version: str
    elevenlabs_configured: bool
    video_configured: bool
    timestamp: datetime


class AngleInfo(BaseModel):
    """One entry of the narrative angle catalogue."""
    angle: str
    name: str
    description: str
    extended: bool


class AnglesResponse(BaseModel):
    """GET /api/angles response."""
    angles: list[AngleInfo]
    base_count: int
    extended_count: int


class PrerequisitesResponse(BaseModel):
    """GET /api/prerequisites response."""
    valid: bool
    issues: list[str] = Field(default_factory=list)
