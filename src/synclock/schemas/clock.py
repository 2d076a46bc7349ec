"""Pydantic schemas for clock synchronization."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ClockSample(BaseModel):
    """Authoritative instantaneous server time reading, always in UTC."""

    server_unix_ms: int = Field(..., description="Milliseconds since the Unix epoch (UTC).")
    iso: str = Field(..., description="RFC 3339 rendering of the same instant.")
    utc_offset_seconds: int = Field(
        default=0,
        description="Always 0; local-timezone rendering is left to the client.",
    )
