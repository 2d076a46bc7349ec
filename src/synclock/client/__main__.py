"""Terminal clock driven by a synclock server.

Usage:
    synclock-clock --url http://localhost:8000 --tz Europe/Berlin --12h
    synclock-clock --mode stopwatch
    synclock-clock --mode timer --duration 0:10:00

Clock mode: press Enter to resync with the server.
Stopwatch mode: Enter starts/stops, ``l`` records a lap, ``r`` resets.
Timer mode: Enter starts/stops, ``r`` resets, ``1``-``5`` pick a preset.
Each command is typed and confirmed with Enter; Ctrl+C quits.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable

from synclock.client.engine import ClockOffsetEngine, RenderedFrame
from synclock.client.formatting import (
    LOCAL_ZONE,
    ClockOptions,
    format_countdown,
    format_stopwatch,
    resolve_zone,
)
from synclock.client.stopwatch import TIMER_PRESETS, CountdownTimer, Stopwatch, TimerNotSetError

logger = logging.getLogger(__name__)


def _write_line(line: str) -> None:
    sys.stdout.write("\r\x1b[K" + line)
    sys.stdout.flush()


def _draw(frame: RenderedFrame) -> None:
    line = f"{frame.time_text}  {frame.date_text}  [{frame.zone_label}]"
    if frame.status_text:
        line += f"  {frame.status_text}"
    _write_line(line)


def stopwatch_line(watch: Stopwatch) -> str:
    line = format_stopwatch(watch.elapsed_ms)
    if watch.laps:
        last = watch.laps[-1]
        line += f"  Lap {last.number} {format_stopwatch(last.elapsed_ms)}"
        line += f" (+{format_stopwatch(last.split_ms)})"
    return line


def countdown_line(timer: CountdownTimer) -> str:
    line = format_countdown(timer.remaining_seconds)
    if timer.completed:
        line += "  Time's up!"
    elif not timer.running:
        line += "  (stopped)"
    return line


def handle_stopwatch_command(watch: Stopwatch, command: str) -> str | None:
    """Apply one typed command; return a message worth printing, if any."""
    command = command.strip().lower()
    if command == "":
        watch.toggle()
    elif command == "l":
        lap = watch.lap()
        if lap is not None:
            return (
                f"Lap {lap.number}  {format_stopwatch(lap.elapsed_ms)}"
                f"  +{format_stopwatch(lap.split_ms)}"
            )
    elif command == "r":
        watch.reset()
    else:
        return f"unknown command {command!r}"
    return None


def handle_timer_command(timer: CountdownTimer, command: str) -> str | None:
    """Apply one typed command; return a message worth printing, if any."""
    command = command.strip().lower()
    if command == "":
        try:
            timer.toggle()
        except TimerNotSetError as exc:
            return str(exc)
    elif command == "r":
        timer.reset()
    elif command.isdigit() and 1 <= int(command) <= len(TIMER_PRESETS):
        if timer.running:
            return "stop the timer before choosing a preset"
        timer.preset(TIMER_PRESETS[int(command) - 1])
    else:
        return f"unknown command {command!r}"
    return None


def _watch_stdin(on_line: Callable[[str], None]) -> None:
    loop = asyncio.get_running_loop()

    def _on_input() -> None:
        on_line(sys.stdin.readline())

    try:
        loop.add_reader(sys.stdin.fileno(), _on_input)
    except (NotImplementedError, ValueError, OSError):
        logger.debug("Keyboard commands via stdin are unavailable on this platform")


async def _render(draw: Callable[[], str], frame_interval: float) -> None:
    while True:
        _write_line(draw())
        await asyncio.sleep(frame_interval)


def _on_command(handler: Callable[[str], str | None]) -> Callable[[str], None]:
    def _apply(line: str) -> None:
        message = handler(line)
        if message:
            sys.stdout.write("\n" + message + "\n")

    return _apply


async def _run_clock(args: argparse.Namespace) -> None:
    options = ClockOptions(
        use_12_hour=args.twelve_hour,
        show_seconds=not args.no_seconds,
        timezone=args.tz,
    )
    engine = ClockOffsetEngine(args.url, options=options, timeout=args.timeout)
    pending: set[asyncio.Task[bool]] = set()

    def _resync(_: str) -> None:
        task = asyncio.get_running_loop().create_task(engine.sync())
        pending.add(task)
        task.add_done_callback(pending.discard)

    try:
        await engine.sync()
        if sys.stdin.isatty():
            _watch_stdin(_resync)
        await engine.run(_draw, frame_interval=args.frame_interval)
    finally:
        await engine.aclose()


async def _run_stopwatch(args: argparse.Namespace) -> None:
    watch = Stopwatch()
    if sys.stdin.isatty():
        _watch_stdin(_on_command(lambda line: handle_stopwatch_command(watch, line)))
    else:
        watch.start()
    await _render(lambda: stopwatch_line(watch), args.frame_interval)


async def _run_timer(args: argparse.Namespace) -> None:
    timer = CountdownTimer(on_complete=lambda: sys.stdout.write("\a"))
    if args.duration is not None:
        timer.preset(args.duration)
    if sys.stdin.isatty():
        _watch_stdin(_on_command(lambda line: handle_timer_command(timer, line)))
    else:
        timer.start()
    await _render(lambda: countdown_line(timer), args.frame_interval)


_RUNNERS = {
    "clock": _run_clock,
    "stopwatch": _run_stopwatch,
    "timer": _run_timer,
}


def _zone(value: str) -> str:
    try:
        resolve_zone(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def parse_duration(value: str) -> int:
    """Parse ``SS``, ``MM:SS`` or ``HH:MM:SS`` into total seconds."""
    try:
        parts = [int(part) for part in value.split(":")]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid duration: {value!r}") from exc
    if not 1 <= len(parts) <= 3 or any(part < 0 for part in parts):
        raise argparse.ArgumentTypeError(f"invalid duration: {value!r}")
    hours, minutes, seconds = [0] * (3 - len(parts)) + parts
    return hours * 3600 + minutes * 60 + seconds


def main() -> None:
    parser = argparse.ArgumentParser(description="Render a server-synced clock in the terminal")
    parser.add_argument(
        "--mode",
        choices=sorted(_RUNNERS),
        default="clock",
        help="What to display",
    )
    parser.add_argument("--url", default="http://localhost:8000", help="synclock server URL")
    parser.add_argument("--tz", type=_zone, default=LOCAL_ZONE, help="IANA timezone or 'local'")
    parser.add_argument("--12h", dest="twelve_hour", action="store_true", help="12-hour mode")
    parser.add_argument("--no-seconds", action="store_true", help="Hide seconds")
    parser.add_argument("--timeout", type=float, default=5.0, help="Sync timeout in seconds")
    parser.add_argument(
        "--duration",
        type=parse_duration,
        default=None,
        help="Countdown length for timer mode, e.g. 90, 5:00 or 1:30:00",
    )
    parser.add_argument(
        "--frame-interval",
        type=float,
        default=0.1,
        help="Seconds between redraws",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log sync details")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )
    try:
        asyncio.run(_RUNNERS[args.mode](args))
    except KeyboardInterrupt:
        sys.stdout.write("\n")
    except TimerNotSetError as exc:
        parser.exit(2, f"error: {exc}\n")


if __name__ == "__main__":
    main()
