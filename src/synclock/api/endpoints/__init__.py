# src/synclock/api/endpoints/__init__.py
"""API endpoint modules."""

from .clock import router as clock_router
from .counter import router as counter_router
from .location import router as location_router
from .system import router as system_router

__all__ = [
    "clock_router",
    "counter_router",
    "location_router",
    "system_router",
]
