# src/synclock/main.py
"""Main entry point for the synclock application."""

from __future__ import annotations

import argparse
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from synclock.api import clock_router, counter_router, location_router, system_router
from synclock.api.errors import register_exception_handlers
from synclock.core.settings import settings
from synclock.services.counter import CounterStore, build_counter_store
from synclock.services.geo import GeoLocator, build_geo_locator

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="synclock API",
    description="Server-synced clock and durable visitor counter",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(clock_router)
app.include_router(counter_router, prefix="/api")
app.include_router(location_router, prefix="/api")
app.include_router(system_router, prefix="/api")


@app.on_event("startup")
async def on_startup() -> None:
    # BootFailureError propagates on purpose: the server must not start
    # serving traffic without a usable counter.
    store = build_counter_store(settings)
    store.open()
    app.state.counter_store = store
    app.state.geo_locator = build_geo_locator(settings)
    logger.info(
        "synclock started (counter backend=%s, geolocation=%s)",
        store.backend,
        "on" if app.state.geo_locator.enabled else "off",
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    locator: GeoLocator | None = getattr(app.state, "geo_locator", None)
    if locator:
        await locator.close()
    store: CounterStore | None = getattr(app.state, "counter_store", None)
    if store:
        store.close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Server-synced clock and durable visitor counter",
        "time": "/time",
        "counter": "/api/counter",
        "docs": "/docs",
        "redoc": "/redoc",
    }


def configure_logging(level: str) -> None:
    """Apply the root logging configuration once for the process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the synclock web service")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=settings.debug,
        help="Reload on source changes (development only)",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)

    import uvicorn

    uvicorn.run(
        "synclock.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
