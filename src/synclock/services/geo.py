"""Optional IP geolocation lookup.

The lookup is a pluggable collaborator: the service works identically with it
disabled, and every failure degrades to ``UNKNOWN_LOCATION``.
"""

from __future__ import annotations

import ipaddress
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError

from synclock.core.settings import Settings
from synclock.schemas.geo import UNKNOWN_LOCATION, GeoLocation

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_OK = 200


class GeoLocator(ABC):
    """Capability interface for resolving a client address to a location."""

    enabled: bool = True

    @abstractmethod
    async def locate(self, ip: str | None) -> GeoLocation:
        """Return the location of ``ip`` or ``UNKNOWN_LOCATION``."""
        ...

    async def close(self) -> None:
        """Release any network resources."""


class DisabledGeoLocator(GeoLocator):
    """Locator used when geolocation is turned off."""

    enabled = False

    async def locate(self, ip: str | None) -> GeoLocation:
        return UNKNOWN_LOCATION


def is_public_address(ip: str | None) -> bool:
    """Return True if ``ip`` parses as a globally routable address."""
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    return address.is_global


class HttpGeoLocator(GeoLocator):
    """Resolve addresses against an ip-api style JSON endpoint.

    ``url_template`` must contain an ``{ip}`` placeholder. A successful body
    looks like ``{"status": "success", "country": ..., "city": ...,
    "timezone": ..., "lat": ..., "lon": ...}``.
    """

    def __init__(
        self,
        url_template: str,
        *,
        timeout: float = 2.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url_template = url_template
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def locate(self, ip: str | None) -> GeoLocation:
        if not is_public_address(ip):
            return UNKNOWN_LOCATION

        url = self._url_template.format(ip=ip)
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("Geolocation lookup for %s failed: %s", ip, exc)
            return UNKNOWN_LOCATION

        if response.status_code != HTTP_OK:
            logger.warning(
                "Geolocation lookup for %s returned HTTP %d", ip, response.status_code
            )
            return UNKNOWN_LOCATION

        try:
            payload: Any = response.json()
        except ValueError as exc:
            logger.warning("Geolocation lookup for %s returned invalid JSON: %s", ip, exc)
            return UNKNOWN_LOCATION

        if not isinstance(payload, dict) or payload.get("status") != "success":
            logger.info("Geolocation lookup for %s found no match", ip)
            return UNKNOWN_LOCATION

        try:
            return GeoLocation.model_validate(
                {
                    key: payload[key]
                    for key in ("country", "city", "timezone", "lat", "lon")
                    if payload.get(key) not in (None, "")
                }
            )
        except ValidationError as exc:
            logger.warning("Geolocation lookup for %s returned malformed data: %s", ip, exc)
            return UNKNOWN_LOCATION

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def build_geo_locator(config: Settings) -> GeoLocator:
    """Return the locator selected by configuration."""
    if not config.geo_enabled:
        return DisabledGeoLocator()
    return HttpGeoLocator(config.geo_api_url, timeout=config.geo_timeout_seconds)
