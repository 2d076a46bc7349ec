"""Pydantic schemas for the visitor counter API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CounterResponse(BaseModel):
    """Current cumulative visitor count."""

    count: int = Field(..., ge=0, description="Cumulative number of visits.")
