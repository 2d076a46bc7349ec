"""Service layer utilities for synclock."""

from .clock import ClockSnapshotService, get_clock_service
from .counter import (
    BootFailureError,
    CounterStore,
    InMemoryCounterStore,
    SqlCounterStore,
    StorageUnavailableError,
    build_counter_store,
)
from .geo import DisabledGeoLocator, GeoLocator, HttpGeoLocator, build_geo_locator

__all__ = [
    "BootFailureError",
    "ClockSnapshotService",
    "CounterStore",
    "DisabledGeoLocator",
    "GeoLocator",
    "HttpGeoLocator",
    "InMemoryCounterStore",
    "SqlCounterStore",
    "StorageUnavailableError",
    "build_counter_store",
    "build_geo_locator",
    "get_clock_service",
]
