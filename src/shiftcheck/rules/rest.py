from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from shiftcheck.config import ValidationConfig
from shiftcheck.conflicts import Conflict, ConflictCategory, Severity
from shiftcheck.rules.base import Rule
from shiftcheck.rules.helpers import resolve_interval, split_windows
from shiftcheck.shift import Shift
from shiftcheck.timeutils import MINUTES_PER_DAY, format_hours

WEEK_MINUTES = 7 * MINUTES_PER_DAY


@dataclass
class RestResult:
    conflicts: list[Conflict] = field(default_factory=list)
    # Longest rest per evaluated window start; None when the window was too short
    longest_rest_hours: dict[dt.date, float | None] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not any(c.blocks_save for c in self.conflicts)


def longest_rest_minutes(shifts: Iterable[Shift], week_start: dt.date) -> int:
    """
    Longest uninterrupted stretch without any shift in the 7-day week starting
    at `week_start`.

    Every kind of shift occupies time, leave included. The week is treated as
    repeating: the stretch after the last shift runs into the first shift of the
    same week, one week later. Structurally broken shifts are skipped.
    """
    spans: list[tuple[int, int]] = []
    for shift in shifts:
        interval, reason = resolve_interval(shift)
        if reason is not None:
            continue
        offset = (shift.date - week_start).days * MINUTES_PER_DAY
        spans.append((offset + interval.start, offset + interval.end))  # type: ignore[union-attr]
    if not spans:
        return WEEK_MINUTES

    spans.sort()
    first_start, running_end = spans[0]
    longest = 0
    for start, end in spans[1:]:
        longest = max(longest, start - running_end)
        running_end = max(running_end, end)
    wrap = first_start + WEEK_MINUTES - running_end
    return max(longest, wrap)


def check_weekly_rest(
    employee_id: str,
    shifts: Sequence[Shift],
    window: Iterable[dt.date],
    cfg: ValidationConfig,
) -> RestResult:
    """
    One rest verdict per employee per 7-day window of `window`.

    The legal rule asks for one continuous rest of MIN_WEEKLY_REST_HOURS per
    week, so only the longest gap matters; short overnight gaps between
    working days are fine.
    """
    result = RestResult()
    required_minutes = cfg.MIN_WEEKLY_REST_HOURS * 60

    for week_start, n_days in split_windows(window):
        week_end = week_start + dt.timedelta(days=n_days)
        in_week = [s for s in shifts if week_start <= s.date < week_end]
        if not in_week:
            result.longest_rest_hours[week_start] = WEEK_MINUTES / 60
            continue

        last_day = week_end - dt.timedelta(days=1)
        if n_days < 7:
            result.longest_rest_hours[week_start] = None
            result.conflicts.append(
                Conflict(
                    id=f"rest-window-{employee_id}-{week_start.isoformat()}",
                    severity=Severity.INFO,
                    category=ConflictCategory.REST_PERIOD,
                    message=(
                        f"Weekly rest of employee {employee_id} not evaluated for "
                        f"{week_start.isoformat()} to {last_day.isoformat()}: "
                        f"the range covers {n_days} day(s), a full week is needed."
                    ),
                    date=week_start,
                    employee_ids=(employee_id,),
                    shift_ids=tuple(sorted(s.id for s in in_week)),
                )
            )
            continue

        longest = longest_rest_minutes(in_week, week_start)
        result.longest_rest_hours[week_start] = longest / 60
        if longest < required_minutes:
            result.conflicts.append(
                Conflict(
                    id=f"rest-{employee_id}-{week_start.isoformat()}",
                    severity=Severity.ERROR,
                    category=ConflictCategory.REST_PERIOD,
                    message=(
                        f"Employee {employee_id} gets at most {format_hours(longest / 60)} "
                        f"of continuous rest in the week of {week_start.isoformat()} "
                        f"(minimum {format_hours(cfg.MIN_WEEKLY_REST_HOURS)})."
                    ),
                    date=week_start,
                    employee_ids=(employee_id,),
                    shift_ids=tuple(sorted(s.id for s in in_week)),
                )
            )

    return result


class WeeklyRestRule(Rule):
    """
    Minimum continuous weekly rest per employee.

    Config used:
      MIN_WEEKLY_REST_HOURS
    """

    order = 50
    name = "WeeklyRest"

    def __init__(self, ctx, **settings):
        super().__init__(ctx, **settings)
        self.results: dict[str, RestResult] = {}

    def check(self) -> list[Conflict]:
        conflicts: list[Conflict] = []
        for employee_id, shifts in self.ctx.shifts_by_employee().items():
            res = check_weekly_rest(employee_id, shifts, self.ctx.window, self.ctx.cfg)
            self.results[employee_id] = res
            conflicts.extend(res.conflicts)
        return conflicts

    def report_descriptors(self) -> list[dict[str, Any]]:
        return [
            {
                "rule": self.name,
                "employee_id": employee_id,
                "valid": res.valid,
                "longest_rest_hours": {
                    d.isoformat(): h for d, h in res.longest_rest_hours.items()
                },
            }
            for employee_id, res in self.results.items()
        ]
