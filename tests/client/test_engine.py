"""Tests for the client-side clock offset engine."""

import asyncio
from collections.abc import Callable

import httpx
import pytest
from fastapi import FastAPI

from synclock.client.engine import ClockOffsetEngine, RenderedFrame, SyncState, wall_clock_ms
from synclock.client.formatting import ClockOptions

SERVER_MS = 1_700_000_000_000
BASE_URL = "http://clock.test"


class FakeClock:
    """Manually advanced clock usable as both wall and monotonic source."""

    def __init__(self, value: float) -> None:
        self.value = value

    def __call__(self) -> float:
        return self.value

    def advance(self, amount: float) -> None:
        self.value += amount


def _sample(server_ms: int = SERVER_MS) -> dict[str, object]:
    return {"server_unix_ms": server_ms, "iso": "2023-11-14T22:13:20.000Z", "utc_offset_seconds": 0}


def _engine(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    local_ms: int = SERVER_MS - 5_000,
    options: ClockOptions | None = None,
) -> tuple[ClockOffsetEngine, FakeClock, FakeClock]:
    local = FakeClock(local_ms)
    monotonic = FakeClock(100.0)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    engine = ClockOffsetEngine(
        BASE_URL,
        client=client,
        options=options or ClockOptions(timezone="UTC"),
        local_clock=local,
        monotonic=monotonic,
    )
    return engine, local, monotonic


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=_sample())


def _down(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.mark.asyncio
async def test_sync_computes_offset_at_receipt() -> None:
    requested: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request)
        return _ok(request)

    engine, local, _ = _engine(handler)

    assert await engine.sync() is True
    assert engine.offset_ms == 5_000
    assert engine.now_ms() == SERVER_MS
    assert engine.last_sample is not None
    assert str(requested[0].url) == f"{BASE_URL}/time"
    assert requested[0].headers["cache-control"] == "no-store"

    local.advance(1_234)
    assert engine.now_ms() == SERVER_MS + 1_234


@pytest.mark.asyncio
async def test_render_makes_no_further_requests() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return _ok(request)

    engine, local, _ = _engine(handler)
    await engine.sync()
    for _ in range(10):
        engine.render_frame()
        local.advance(16)
    assert calls == 1


@pytest.mark.asyncio
async def test_failed_first_sync_defaults_offset_to_zero() -> None:
    engine, local, _ = _engine(_down)

    assert await engine.sync() is False
    assert engine.offset_ms == 0
    assert engine.now_ms() == local()
    assert engine.sync_failed
    assert engine.render_frame().status_text == "Sync failed"


@pytest.mark.asyncio
async def test_failed_resync_keeps_previous_offset() -> None:
    healthy = True

    def handler(request: httpx.Request) -> httpx.Response:
        if healthy:
            return _ok(request)
        return httpx.Response(503)

    engine, _, _ = _engine(handler)
    await engine.sync()
    healthy = False

    assert await engine.sync() is False
    assert engine.offset_ms == 5_000
    assert engine.state is SyncState.FAILED


@pytest.mark.asyncio
async def test_manual_retry_recovers() -> None:
    attempts = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return _ok(request)

    engine, _, _ = _engine(handler)
    assert await engine.sync() is False
    assert await engine.sync() is True
    assert engine.offset_ms == 5_000
    assert not engine.sync_failed


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json={"iso": "2023-11-14T22:13:20.000Z"}),
        httpx.Response(200, json={**_sample(), "server_unix_ms": "soon"}),
    ],
)
async def test_malformed_response_is_a_sync_failure(response: httpx.Response) -> None:
    engine, _, _ = _engine(lambda request: response)
    assert await engine.sync() is False
    assert engine.offset_ms == 0


@pytest.mark.asyncio
async def test_indicators_are_transient() -> None:
    healthy = True

    def handler(request: httpx.Request) -> httpx.Response:
        return _ok(request) if healthy else _down(request)

    engine, _, monotonic = _engine(handler)
    assert engine.state is SyncState.IDLE

    await engine.sync()
    assert engine.status_text == "Synced"
    monotonic.advance(2.0)
    assert engine.state is SyncState.IDLE
    assert engine.status_text == ""

    healthy = False
    await engine.sync()
    monotonic.advance(2.9)
    assert engine.sync_failed
    monotonic.advance(0.2)
    assert not engine.sync_failed


@pytest.mark.asyncio
async def test_render_frame_formats_server_time() -> None:
    engine, _, _ = _engine(_ok)
    await engine.sync()

    frame = engine.render_frame()

    assert frame == RenderedFrame(
        time_text="22:13:20",
        date_text="Tuesday, November 14, 2023",
        zone_label="UTC",
        status_text="Synced",
    )


@pytest.mark.asyncio
async def test_option_changes_apply_to_next_frame() -> None:
    engine, _, _ = _engine(_ok)
    await engine.sync()

    engine.set_options(use_12_hour=True, show_seconds=False, timezone="Asia/Tokyo")
    frame = engine.render_frame()

    assert frame.time_text == "7:13 AM"
    assert frame.date_text == "Wednesday, November 15, 2023"
    assert frame.zone_label == "Asia/Tokyo"


def test_invalid_timezone_keeps_previous_options() -> None:
    engine, _, _ = _engine(_ok)
    before = engine.options

    with pytest.raises(ValueError):
        engine.set_options(timezone="Nowhere/Atlantis")

    assert engine.options == before


def test_invalid_initial_timezone_is_rejected() -> None:
    with pytest.raises(ValueError):
        _engine(_ok, options=ClockOptions(timezone="Nowhere/Atlantis"))


@pytest.mark.asyncio
async def test_run_loop_repeats_until_cancelled() -> None:
    engine, local, _ = _engine(_ok)
    await engine.sync()
    frames: list[RenderedFrame] = []

    def on_frame(frame: RenderedFrame) -> None:
        frames.append(frame)
        local.advance(1_000)
        if len(frames) == 2:
            engine.set_options(use_12_hour=True)

    task = asyncio.create_task(engine.run(on_frame, frame_interval=0))
    while len(frames) < 4:
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert [f.time_text for f in frames[:3]] == ["22:13:20", "22:13:21", "10:13:22 PM"]


@pytest.mark.asyncio
async def test_offset_tracks_real_server_time(app: FastAPI) -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport) as client:
        engine = ClockOffsetEngine("http://test", client=client)
        assert await engine.sync() is True
        assert engine.last_sample is not None

    assert abs(engine.now_ms() - wall_clock_ms()) < 50
