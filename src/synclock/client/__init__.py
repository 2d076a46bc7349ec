# src/synclock/client/__init__.py
"""Clock client: one-shot sync plus local render loop, stopwatch and countdown."""

from .engine import ClockOffsetEngine, RenderedFrame, SyncFailureError, SyncState
from .formatting import LOCAL_ZONE, ClockOptions
from .stopwatch import CountdownTimer, Lap, Stopwatch, TimerNotSetError

__all__ = [
    "ClockOffsetEngine",
    "ClockOptions",
    "CountdownTimer",
    "LOCAL_ZONE",
    "Lap",
    "RenderedFrame",
    "Stopwatch",
    "SyncFailureError",
    "SyncState",
    "TimerNotSetError",
]
