"""Clock synchronization endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response
from pydantic_core import PydanticSerializationError

from synclock.api.dependencies import ClockServiceDep
from synclock.api.errors import EncodingFailureError
from synclock.schemas.clock import ClockSample

# Configure logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(tags=["clock"])


@router.get("/time", response_model=ClockSample)
def get_time(clock: ClockServiceDep) -> Response:
    """Return the server's current UTC instant.

    Clients fetch this once, derive a clock offset from it and render locally
    afterwards. The response is never cached.
    """
    sample = clock.snapshot()
    try:
        body = sample.model_dump_json()
    except (PydanticSerializationError, ValueError, TypeError) as exc:
        logger.error("EncodingFailure: cannot serialize clock sample: %s", exc, exc_info=True)
        raise EncodingFailureError("clock sample") from exc
    return Response(
        content=body,
        media_type="application/json",
        headers={"Cache-Control": "no-store"},
    )
