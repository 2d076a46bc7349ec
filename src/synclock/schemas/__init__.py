# src/synclock/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .clock import ClockSample
from .counter import CounterResponse
from .geo import UNKNOWN_LOCATION, GeoLocation

__all__ = [
    "ClockSample",
    "CounterResponse",
    "GeoLocation", "UNKNOWN_LOCATION",
]
