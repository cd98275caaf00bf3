# src/shiftcheck/timeutils.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, NamedTuple

from shiftcheck.exceptions import MalformedTimeError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"(\d{2}):(\d{2})(?::(\d{2}))?")


class Interval(NamedTuple):
    """Same-day interval in minutes since midnight, end exclusive."""

    start: int
    end: int

    @property
    def minutes(self) -> int:
        return max(0, self.end - self.start)


def to_minutes(time: str) -> int:
    """
    Parse "HH:MM" into minutes since midnight.

    A trailing ":SS" (as returned by SQL time columns) is accepted and ignored.
    "24:00" is accepted so a shift can end at midnight.
    """
    if not isinstance(time, str):
        raise MalformedTimeError(time)
    match = _TIME_RE.fullmatch(time)
    if match is None:
        raise MalformedTimeError(time)
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3) or 0)
    if minutes > 59 or seconds > 59:
        raise MalformedTimeError(time)
    if hours > 24 or (hours == 24 and (minutes or seconds)):
        raise MalformedTimeError(time)
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM" ("24:00" for end of day)."""
    if minutes == MINUTES_PER_DAY:
        return "24:00"
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def effective_minutes(start: str, end: str, break_minutes: int) -> int:
    start_min, end_min = to_minutes(start), to_minutes(end)
    if end_min <= start_min:
        return 0
    return max(0, end_min - start_min - int(break_minutes))


def effective_hours(start: str, end: str, break_minutes: int) -> float:
    """
    Worked hours after the break: max(0, (end - start - break) / 60).

    Exporters use this as the single source of truth for per-shift hours.
    Returns 0 when end <= start (no overnight semantics).
    """
    return effective_minutes(start, end, break_minutes) / 60


def overlaps(a: Interval, b: Interval) -> bool:
    """True iff the intervals share time; touching endpoints do not overlap."""
    return a.start < b.end and b.start < a.end


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise ValueError(f"Invalid ISO date {value!r}") from exc
    raise TypeError("Dates must be ISO strings or date/datetime objects.")


def gap_hours(day_a: Any, end_a: str | int, day_b: Any, start_b: str | int) -> float:
    """
    Hours between end_a on day_a and start_b on day_b.

    Computed as whole-day difference * 24 plus the minute difference, so
    multi-day gaps work and a negative result means the second point is earlier.
    """
    end_min = end_a if isinstance(end_a, int) else to_minutes(end_a)
    start_min = start_b if isinstance(start_b, int) else to_minutes(start_b)
    days = (parse_date(day_b) - parse_date(day_a)).days
    return days * 24 + (start_min - end_min) / 60


def format_hours(hours: float) -> str:
    """7.75 -> "7h45"."""
    total = int(round(abs(hours) * 60))
    sign = "-" if hours < 0 else ""
    return f"{sign}{total // 60}h{total % 60:02d}"
