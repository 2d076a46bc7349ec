"""Client geolocation endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from synclock.api.dependencies import ClientIpDep, GeoLocatorDep
from synclock.schemas.geo import GeoLocation

router = APIRouter(prefix="/location", tags=["location"])


@router.get("", response_model=GeoLocation)
async def get_location(locator: GeoLocatorDep, ip: ClientIpDep) -> GeoLocation:
    """Return the approximate location of the caller.

    Falls back to ``Unknown``/UTC/(0, 0) when lookups are disabled or fail.
    """
    return await locator.locate(ip)
