"""Visitor counter endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from synclock.api.dependencies import CounterStoreDep
from synclock.schemas.counter import CounterResponse

router = APIRouter(prefix="/counter", tags=["counter"])


# Handlers are plain functions so each request runs on its own worker thread;
# the store's lock is the only coordination between them.


@router.get("", response_model=CounterResponse)
def read_counter(store: CounterStoreDep) -> CounterResponse:
    """Return the current visitor count."""
    return CounterResponse(count=store.get())


@router.post("", response_model=CounterResponse)
def increment_counter(store: CounterStoreDep) -> CounterResponse:
    """Record a visit and return the updated count."""
    store.increment()
    # Separate read: concurrent POSTs may both report the later total.
    return CounterResponse(count=store.get())
