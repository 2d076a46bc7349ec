"""Display options and text formatting for the clock client."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

LOCAL_ZONE = "local"

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class ClockOptions:
    """Named display options read by the render loop once per frame."""

    use_12_hour: bool = False
    show_seconds: bool = True
    timezone: str = LOCAL_ZONE


def resolve_zone(name: str) -> tzinfo | None:
    """Return the tzinfo for an IANA ``name``, or None for the local zone.

    Raises:
        ValueError: If ``name`` is not a known IANA timezone.
    """
    if name == LOCAL_ZONE:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"unknown timezone: {name!r}") from exc


def localize(instant: datetime, zone: tzinfo | None) -> datetime:
    """Convert an aware ``instant`` into ``zone`` (system local time if None)."""
    if zone is None:
        return instant.astimezone()
    return instant.astimezone(zone)


def format_time(moment: datetime, *, use_12_hour: bool, show_seconds: bool) -> str:
    """Render the time of day.

    24-hour mode yields ``HH:MM[:SS]``; 12-hour mode yields ``H:MM[:SS] AM``.
    The seconds component is omitted entirely rather than stripped afterwards.
    """
    if use_12_hour:
        fields = [str(moment.hour % 12 or 12), f"{moment.minute:02d}"]
    else:
        fields = [f"{moment.hour:02d}", f"{moment.minute:02d}"]
    if show_seconds:
        fields.append(f"{moment.second:02d}")
    text = ":".join(fields)
    if use_12_hour:
        text += " AM" if moment.hour < 12 else " PM"
    return text


def format_date(moment: datetime) -> str:
    """Render a long date, e.g. ``Tuesday, November 14, 2023``."""
    return (
        f"{_WEEKDAYS[moment.weekday()]}, {_MONTHS[moment.month - 1]} "
        f"{moment.day}, {moment.year}"
    )


def zone_label(name: str) -> str:
    return "Local" if name == LOCAL_ZONE else name


def format_stopwatch(elapsed_ms: int) -> str:
    """Render a stopwatch reading as ``HH:MM:SS.mmm`` at centisecond resolution."""
    total_seconds, millis = divmod(max(elapsed_ms, 0), 1000)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis // 10 * 10:03d}"


def format_countdown(remaining_seconds: int) -> str:
    """Render whole seconds as ``HH:MM:SS``."""
    hours, rest = divmod(max(remaining_seconds, 0), 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
