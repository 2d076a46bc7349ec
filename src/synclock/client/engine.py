"""Client-side clock offset engine.

The engine fetches a single :class:`ClockSample` from ``GET /time``, records
``offset = server_unix_ms - local_now_ms`` at the moment the response arrives,
and from then on renders ``local_now + offset`` every frame without touching
the network again. Accuracy is bounded by the latency of that one request plus
local clock drift; a resync is only ever triggered explicitly.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from synclock.client.formatting import (
    ClockOptions,
    format_date,
    format_time,
    localize,
    resolve_zone,
    zone_label,
)
from synclock.schemas.clock import ClockSample
from synclock.services.clock import from_unix_ms

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_OK = 200
DEFAULT_FRAME_INTERVAL = 1 / 30


class SyncFailureError(RuntimeError):
    """Raised when the one-shot time fetch fails or times out."""


class SyncState(Enum):
    """Lifecycle of the sync indicator."""

    IDLE = "idle"
    SYNCING = "syncing"
    SYNCED = "synced"
    FAILED = "failed"


_STATUS_TEXT = {
    SyncState.IDLE: "",
    SyncState.SYNCING: "Syncing...",
    SyncState.SYNCED: "Synced",
    SyncState.FAILED: "Sync failed",
}


@dataclass(frozen=True)
class RenderedFrame:
    """Everything one render step draws."""

    time_text: str
    date_text: str
    zone_label: str
    status_text: str


def wall_clock_ms() -> int:
    """Return the local wall clock in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class ClockOffsetEngine:
    """Turn one authoritative sample into a continuously updating display."""

    def __init__(
        self,
        base_url: str,
        *,
        options: ClockOptions | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
        local_clock: Callable[[], int] = wall_clock_ms,
        monotonic: Callable[[], float] = time.monotonic,
        success_hold_seconds: float = 2.0,
        failure_hold_seconds: float = 3.0,
    ) -> None:
        """Initialize the engine.

        Args:
            base_url: Root URL of the synclock server.
            options: Initial display options.
            client: Optional shared HTTP client; one is created when omitted.
            timeout: Request timeout for the sync fetch, in seconds.
            local_clock: Local wall clock in epoch milliseconds.
            monotonic: Monotonic clock used to expire transient indicators.
            success_hold_seconds: How long "Synced" stays visible.
            failure_hold_seconds: How long "Sync failed" stays visible.
        """
        self._time_url = base_url.rstrip("/") + "/time"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._local_clock = local_clock
        self._monotonic = monotonic
        self._holds = {
            SyncState.SYNCED: success_hold_seconds,
            SyncState.FAILED: failure_hold_seconds,
        }

        if options is not None:
            resolve_zone(options.timezone)
        self._options = options or ClockOptions()
        self._offset_ms = 0
        self._last_sample: ClockSample | None = None
        self._state = SyncState.IDLE
        self._state_since = monotonic()

    @property
    def offset_ms(self) -> int:
        """Last successfully measured ``server - local`` difference (0 before any sync)."""
        return self._offset_ms

    @property
    def last_sample(self) -> ClockSample | None:
        return self._last_sample

    @property
    def options(self) -> ClockOptions:
        return self._options

    @property
    def state(self) -> SyncState:
        """Current indicator state; transient states expire back to IDLE."""
        hold = self._holds.get(self._state)
        if hold is not None and self._monotonic() - self._state_since >= hold:
            self._set_state(SyncState.IDLE)
        return self._state

    @property
    def sync_failed(self) -> bool:
        """True while the transient failure indicator is showing."""
        return self.state is SyncState.FAILED

    @property
    def status_text(self) -> str:
        return _STATUS_TEXT[self.state]

    def _set_state(self, state: SyncState) -> None:
        self._state = state
        self._state_since = self._monotonic()

    def set_options(self, **changes: Any) -> ClockOptions:
        """Replace display options; the next frame picks them up.

        Raises:
            ValueError: If ``timezone`` is not a known IANA name. The previous
                options stay active in that case.
        """
        updated = dataclasses.replace(self._options, **changes)
        resolve_zone(updated.timezone)
        self._options = updated
        logger.debug("Clock options changed: %s", updated)
        return updated

    async def _fetch_sample(self) -> tuple[ClockSample, int]:
        try:
            response = await self._client.get(
                self._time_url, headers={"Cache-Control": "no-store"}
            )
        except httpx.HTTPError as exc:
            raise SyncFailureError(f"request to {self._time_url} failed: {exc}") from exc
        received_ms = self._local_clock()

        if response.status_code != HTTP_OK:
            raise SyncFailureError(f"server answered HTTP {response.status_code}")
        try:
            sample = ClockSample.model_validate_json(response.content)
        except ValueError as exc:
            raise SyncFailureError(f"malformed time response: {exc}") from exc
        return sample, received_ms

    async def sync(self) -> bool:
        """Fetch one sample and recompute the offset.

        Returns True on success. On failure the previous offset is kept, the
        failure indicator is raised, and False is returned; the caller may
        simply call ``sync()`` again to retry.
        """
        self._set_state(SyncState.SYNCING)
        try:
            sample, received_ms = await self._fetch_sample()
        except SyncFailureError as exc:
            logger.warning("Time sync failed, keeping offset %d ms: %s", self._offset_ms, exc)
            self._set_state(SyncState.FAILED)
            return False

        self._offset_ms = sample.server_unix_ms - received_ms
        self._last_sample = sample
        self._set_state(SyncState.SYNCED)
        logger.info("Time sync complete: offset=%d ms server=%s", self._offset_ms, sample.iso)
        return True

    def now_ms(self) -> int:
        """Approximate server time: local wall clock plus the offset."""
        return self._local_clock() + self._offset_ms

    def render_frame(self) -> RenderedFrame:
        """Compute what to draw for the current frame."""
        options = self._options
        moment = localize(from_unix_ms(self.now_ms()), resolve_zone(options.timezone))
        return RenderedFrame(
            time_text=format_time(
                moment,
                use_12_hour=options.use_12_hour,
                show_seconds=options.show_seconds,
            ),
            date_text=format_date(moment),
            zone_label=zone_label(options.timezone),
            status_text=self.status_text,
        )

    async def run(
        self,
        on_frame: Callable[[RenderedFrame], None],
        *,
        frame_interval: float = DEFAULT_FRAME_INTERVAL,
    ) -> None:
        """Render forever, one frame per ``frame_interval``.

        The loop has no end condition; cancel the surrounding task to stop it.
        """
        while True:
            on_frame(self.render_frame())
            await asyncio.sleep(frame_interval)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
