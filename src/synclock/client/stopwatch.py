"""Stopwatch and countdown timer for the clock client.

Both run entirely on a local monotonic clock; neither needs the server. All
readings are computed on demand, so a render loop can poll them every frame.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_HOURS = 23
MAX_MINUTES = 59
MAX_SECONDS = 59
DEFAULT_COUNTDOWN = (0, 5, 0)
TIMER_PRESETS = (60, 300, 600, 1500, 3600)


class TimerNotSetError(ValueError):
    """Raised when a countdown is started with a zero duration."""


@dataclass(frozen=True)
class Lap:
    """One recorded lap: cumulative time and the split since the previous lap."""

    number: int
    elapsed_ms: int
    split_ms: int


class Stopwatch:
    """Start/stop stopwatch with a lap list."""

    def __init__(self, monotonic: Callable[[], float] = time.monotonic) -> None:
        self._monotonic = monotonic
        self._accumulated = 0.0
        self._started_at: float | None = None
        self._laps: list[Lap] = []

    @property
    def running(self) -> bool:
        return self._started_at is not None

    @property
    def elapsed_ms(self) -> int:
        """Total running time, excluding stopped periods."""
        elapsed = self._accumulated
        if self._started_at is not None:
            elapsed += self._monotonic() - self._started_at
        return int(elapsed * 1000)

    @property
    def laps(self) -> tuple[Lap, ...]:
        return tuple(self._laps)

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self._monotonic()

    def stop(self) -> None:
        if self._started_at is not None:
            self._accumulated += self._monotonic() - self._started_at
            self._started_at = None

    def toggle(self) -> bool:
        """Start if stopped, stop if running; return the new running state."""
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def reset(self) -> None:
        """Stop, zero the reading and clear all laps."""
        self._started_at = None
        self._accumulated = 0.0
        self._laps.clear()

    def lap(self) -> Lap | None:
        """Record a lap; laps can only be taken while running."""
        if not self.running:
            return None
        elapsed = self.elapsed_ms
        previous = self._laps[-1].elapsed_ms if self._laps else 0
        lap = Lap(number=len(self._laps) + 1, elapsed_ms=elapsed, split_ms=elapsed - previous)
        self._laps.append(lap)
        return lap


def _clamp(value: int, upper: int) -> int:
    return min(max(value, 0), upper)


class CountdownTimer:
    """Countdown from an ``hours:minutes:seconds`` setting to zero.

    Inputs are clamped the way an entry form would: negatives become 0, hours
    cap at 23 and minutes/seconds at 59. Stopping abandons the run; the next
    ``start()`` counts down the full setting again.
    """

    def __init__(
        self,
        monotonic: Callable[[], float] = time.monotonic,
        *,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        self._monotonic = monotonic
        self._on_complete = on_complete
        self._setting = DEFAULT_COUNTDOWN
        self._duration = 0
        self._started_at: float | None = None
        self._frozen: int | None = None
        self._completed = False

    @property
    def setting(self) -> tuple[int, int, int]:
        return self._setting

    @property
    def setting_seconds(self) -> int:
        hours, minutes, seconds = self._setting
        return hours * 3600 + minutes * 60 + seconds

    @property
    def running(self) -> bool:
        self._check_completion()
        return self._started_at is not None

    @property
    def completed(self) -> bool:
        self._check_completion()
        return self._completed

    @property
    def remaining_seconds(self) -> int:
        """Whole seconds left, rounded up while running.

        When idle this is the current setting, after a stop it is the value
        shown at the moment of stopping, and after completion it is 0.
        """
        self._check_completion()
        if self._started_at is not None:
            left = self._duration - (self._monotonic() - self._started_at)
            return max(0, math.ceil(left))
        if self._completed:
            return 0
        if self._frozen is not None:
            return self._frozen
        return self.setting_seconds

    def set(self, hours: int = 0, minutes: int = 0, seconds: int = 0) -> tuple[int, int, int]:
        """Change the setting; ignored while the timer is running."""
        if self.running:
            return self._setting
        self._setting = (
            _clamp(hours, MAX_HOURS),
            _clamp(minutes, MAX_MINUTES),
            _clamp(seconds, MAX_SECONDS),
        )
        self._frozen = None
        self._completed = False
        return self._setting

    def preset(self, total_seconds: int) -> tuple[int, int, int]:
        """Split ``total_seconds`` into the hours/minutes/seconds setting."""
        return self.set(total_seconds // 3600, (total_seconds % 3600) // 60, total_seconds % 60)

    def start(self) -> None:
        """Count down the current setting from the top.

        Raises:
            TimerNotSetError: If the setting is zero.
        """
        if self.running:
            return
        duration = self.setting_seconds
        if duration <= 0:
            raise TimerNotSetError("set a timer duration first")
        self._duration = duration
        self._started_at = self._monotonic()
        self._frozen = None
        self._completed = False

    def stop(self) -> None:
        if self.running:
            self._frozen = self.remaining_seconds
            self._started_at = None

    def toggle(self) -> bool:
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def reset(self) -> None:
        """Stop and restore the default five-minute setting."""
        self._started_at = None
        self._setting = DEFAULT_COUNTDOWN
        self._duration = 0
        self._frozen = None
        self._completed = False

    def _check_completion(self) -> None:
        if self._started_at is None:
            return
        if self._monotonic() - self._started_at < self._duration:
            return
        self._started_at = None
        self._completed = True
        logger.info("Countdown of %d s complete", self._duration)
        if self._on_complete is not None:
            self._on_complete()
