"""Pydantic schemas for the optional geolocation lookup."""

from __future__ import annotations

from pydantic import BaseModel


class GeoLocation(BaseModel):
    """Approximate location of a client address."""

    country: str = "Unknown"
    city: str = "Unknown"
    timezone: str = "UTC"
    lat: float = 0.0
    lon: float = 0.0


UNKNOWN_LOCATION = GeoLocation()
