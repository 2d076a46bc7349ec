"""Public configuration endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from synclock.api.dependencies import CounterStoreDep, GeoLocatorDep
from synclock.core.settings import settings

router = APIRouter(tags=["system"])


@router.get("/config")
async def get_public_config(
    store: CounterStoreDep, locator: GeoLocatorDep
) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes connection strings; suitable for the page template and the
    embedded comment widget.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "counter": {"backend": store.backend},
        "geo": {"enabled": locator.enabled},
        "comments": {
            "enabled": settings.comments_enabled,
            **settings.comments_options,
        },
    }
