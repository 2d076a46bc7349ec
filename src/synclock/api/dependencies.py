"""Shared API dependencies for request handlers."""

from typing import Annotated

from fastapi import Depends, Request

from synclock.services.clock import ClockSnapshotService, get_clock_service
from synclock.services.counter import CounterStore
from synclock.services.geo import GeoLocator


def get_clock_service_dep() -> ClockSnapshotService:
    """Return the shared clock snapshot service."""
    return get_clock_service()


def get_counter_store(request: Request) -> CounterStore:
    """Return the counter store opened at application startup."""
    store: CounterStore = request.app.state.counter_store
    return store


def get_geo_locator(request: Request) -> GeoLocator:
    """Return the geolocation collaborator configured at startup."""
    locator: GeoLocator = request.app.state.geo_locator
    return locator


def client_ip(request: Request) -> str | None:
    """Return the originating client address.

    The first entry of ``X-Forwarded-For`` wins when present, since the
    service is normally deployed behind a reverse proxy.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",", 1)[0].strip()
        if first:
            return first
    if request.client is not None:
        return request.client.host
    return None


ClockServiceDep = Annotated[ClockSnapshotService, Depends(get_clock_service_dep)]
CounterStoreDep = Annotated[CounterStore, Depends(get_counter_store)]
GeoLocatorDep = Annotated[GeoLocator, Depends(get_geo_locator)]
ClientIpDep = Annotated[str | None, Depends(client_ip)]
