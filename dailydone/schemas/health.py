"""Pydantic schemas for the ping endpoint and the shared error envelope."""

from datetime import datetime

from pydantic import BaseModel, Field


class PingResponse(BaseModel):
    """Response body for GET /ping."""

    message: str = Field(description="Configured ping message (PING_MESSAGE)")
    timestamp: datetime = Field(description="Server time in UTC")


class ErrorResponse(BaseModel):
    """Envelope for every failed API call."""

    success: bool = False
    message: str
    error: str | None = Field(
        default=None,
        description="Exception detail; only populated outside production",
    )
