# src/synclock/api/__init__.py
"""HTTP API for synclock."""

from .endpoints import clock_router, counter_router, location_router, system_router

__all__ = [
    "clock_router",
    "counter_router",
    "location_router",
    "system_router",
]
