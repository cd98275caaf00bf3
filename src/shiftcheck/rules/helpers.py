from __future__ import annotations

import datetime as dt
from collections import defaultdict
from typing import Iterable, Iterator

from shiftcheck.conflicts import Conflict, ConflictCategory, Severity
from shiftcheck.exceptions import MalformedTimeError
from shiftcheck.shift import Shift
from shiftcheck.timeutils import Interval


def resolve_interval(shift: Shift) -> tuple[Interval | None, str | None]:
    """Return (interval, None) for a sound shift, or (None, reason) when it is structurally broken."""
    try:
        interval = shift.interval
    except MalformedTimeError as exc:
        return None, f"malformed time {exc.value!r}"
    if interval.end <= interval.start:
        return None, (
            f"ends at {shift.end_time} but starts at {shift.start_time} "
            "(overnight shifts are not supported)"
        )
    if shift.break_minutes < 0:
        return None, f"negative break of {shift.break_minutes} min"
    if shift.break_minutes >= interval.minutes:
        return None, (
            f"break of {shift.break_minutes} min is not shorter than the "
            f"{interval.minutes} min shift"
        )
    return interval, None


def structural_conflict(shift: Shift, reason: str) -> Conflict:
    return Conflict(
        id=f"structural-{shift.id}",
        severity=Severity.ERROR,
        category=ConflictCategory.STRUCTURAL,
        message=(
            f"Shift {shift.id} of employee {shift.employee_id} on "
            f"{shift.date.isoformat()} is invalid: {reason}."
        ),
        date=shift.date,
        employee_ids=(shift.employee_id,),
        shift_ids=(shift.id,),
    )


def group_by_date(shifts: Iterable[Shift]) -> dict[dt.date, list[Shift]]:
    grouped: dict[dt.date, list[Shift]] = defaultdict(list)
    for shift in shifts:
        grouped[shift.date].append(shift)
    return {d: sorted(grouped[d], key=lambda s: s.id) for d in sorted(grouped)}


def split_windows(dates: Iterable[dt.date]) -> Iterator[tuple[dt.date, int]]:
    """
    Cut the span of `dates` into consecutive 7-day windows.

    Yields (window_start, n_days); only the trailing window may be shorter
    than 7 days.
    """
    ordered = sorted(set(dates))
    if not ordered:
        return
    start, last = ordered[0], ordered[-1]
    while start <= last:
        n_days = min(7, (last - start).days + 1)
        yield start, n_days
        start += dt.timedelta(days=7)


def monday_week(day: dt.date) -> list[dt.date]:
    monday = day - dt.timedelta(days=day.weekday())
    return [monday + dt.timedelta(days=i) for i in range(7)]
