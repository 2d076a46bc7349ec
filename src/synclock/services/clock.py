"""Authoritative server clock snapshots."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from synclock.db.time import EPOCH, utcnow
from synclock.schemas.clock import ClockSample

_ONE_MS = timedelta(milliseconds=1)


def to_unix_ms(instant: datetime) -> int:
    """Return whole milliseconds between the Unix epoch and ``instant``."""
    return (instant - EPOCH) // _ONE_MS


def from_unix_ms(value: int) -> datetime:
    """Return the aware UTC datetime for ``value`` milliseconds since the epoch."""
    return EPOCH + timedelta(milliseconds=value)


def format_rfc3339(instant: datetime) -> str:
    """Render ``instant`` as RFC 3339 in UTC with millisecond precision."""
    text = instant.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


class ClockSnapshotService:
    """Produce the current instant as a :class:`ClockSample`.

    The service holds no mutable state and may be shared freely across
    concurrent requests.
    """

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now or utcnow

    def snapshot(self) -> ClockSample:
        """Return the current UTC instant.

        The instant is truncated to whole milliseconds before rendering so that
        ``iso`` and ``server_unix_ms`` describe exactly the same moment.
        """
        server_unix_ms = to_unix_ms(self._now())
        return ClockSample(
            server_unix_ms=server_unix_ms,
            iso=format_rfc3339(from_unix_ms(server_unix_ms)),
            utc_offset_seconds=0,
        )


@lru_cache(maxsize=1)
def get_clock_service() -> ClockSnapshotService:
    """Return the process-wide clock snapshot service."""
    return ClockSnapshotService()
