"""API-level exceptions and their handlers."""

from __future__ import annotations

from fastapi import FastAPI, Request, Response, status


class EncodingFailureError(RuntimeError):
    """Raised when a response body cannot be serialized.

    The failure has already been logged where it happened; the caller only
    observes an empty 500 response.
    """


async def encoding_failure_handler(request: Request, exc: Exception) -> Response:
    """Answer with an empty body so the client sees an incomplete response."""
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach API exception handlers to ``app``."""
    app.add_exception_handler(EncodingFailureError, encoding_failure_handler)
