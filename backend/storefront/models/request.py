"""Shared API request and response models."""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]


class MessageResponse(BaseModel):
    message: str


class CacheStatsResponse(BaseModel):
    size: int
    keys: list[str]


class CacheClearResponse(BaseModel):
    cleared: bool
    stats: CacheStatsResponse
