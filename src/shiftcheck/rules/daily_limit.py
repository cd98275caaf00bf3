from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Sequence

from shiftcheck.classifier import ShiftClassifier, ShiftKind
from shiftcheck.config import ValidationConfig
from shiftcheck.conflicts import Conflict, ConflictCategory, Severity
from shiftcheck.rules.base import Rule
from shiftcheck.rules.helpers import group_by_date, resolve_interval, structural_conflict
from shiftcheck.shift import Shift
from shiftcheck.timeutils import Interval, format_hours, overlaps


@dataclass
class DailyLimitResult:
    conflicts: list[Conflict] = field(default_factory=list)
    # Effective hours counted toward the cap, per day
    daily_hours: dict[dt.date, float] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not any(c.blocks_save for c in self.conflicts)


def check_daily_limits(
    employee_id: str,
    shifts: Sequence[Shift],
    cfg: ValidationConfig,
    classifier: ShiftClassifier,
) -> DailyLimitResult:
    """
    Per calendar day for one employee: structural sanity, overlaps, the daily
    hour cap and the mandatory break.

    Overlapping shifts are reported once as overlaps and left out of the
    day's hour total.
    """
    result = DailyLimitResult()

    for day, day_shifts in group_by_date(shifts).items():
        sound: list[tuple[Shift, Interval]] = []
        for shift in day_shifts:
            interval, reason = resolve_interval(shift)
            if reason is not None:
                result.conflicts.append(structural_conflict(shift, reason))
            else:
                sound.append((shift, interval))  # type: ignore[arg-type]
        sound.sort(key=lambda pair: (pair[1].start, pair[1].end, pair[0].id))

        in_overlap: set[str] = set()
        for (a, ia), (b, ib) in combinations(sound, 2):
            if overlaps(ia, ib):
                in_overlap.update((a.id, b.id))
                result.conflicts.append(_overlap_conflict(employee_id, day, a, b))

        counted = [
            (shift, interval)
            for shift, interval in sound
            if shift.id not in in_overlap and classifier.counts_toward_hours(shift)
        ]
        if not counted:
            continue

        total_minutes = sum(iv.minutes - s.break_minutes for s, iv in counted)
        result.daily_hours[day] = total_minutes / 60
        shift_ids = tuple(s.id for s, _ in counted)

        if total_minutes > cfg.max_daily_minutes:
            result.conflicts.append(
                Conflict(
                    id=f"daily-limit-{employee_id}-{day.isoformat()}",
                    severity=Severity.ERROR,
                    category=ConflictCategory.DAILY_LIMIT,
                    message=(
                        f"Employee {employee_id} works {format_hours(total_minutes / 60)} "
                        f"on {day.isoformat()}, above the "
                        f"{format_hours(cfg.MAX_DAILY_HOURS)} daily maximum."
                    ),
                    date=day,
                    employee_ids=(employee_id,),
                    shift_ids=shift_ids,
                )
            )

        # Training or on-call time between two work shifts is not a break
        occupied = [
            (shift, interval)
            for shift, interval in sound
            if shift.id not in in_overlap
            and classifier.classify(shift) is not ShiftKind.LEAVE
        ]
        if total_minutes > cfg.break_threshold_minutes and not _has_break(
            occupied, cfg.MANDATORY_BREAK_MINUTES
        ):
            result.conflicts.append(
                Conflict(
                    id=f"missing-break-{employee_id}-{day.isoformat()}",
                    severity=Severity.WARNING,
                    category=ConflictCategory.MISSING_BREAK,
                    message=(
                        f"Employee {employee_id} works {format_hours(total_minutes / 60)} "
                        f"on {day.isoformat()} without the mandatory "
                        f"{cfg.MANDATORY_BREAK_MINUTES} min break required after "
                        f"{format_hours(cfg.MANDATORY_BREAK_AFTER_HOURS)}."
                    ),
                    date=day,
                    employee_ids=(employee_id,),
                    shift_ids=shift_ids,
                )
            )

    return result


def _has_break(occupied: list[tuple[Shift, Interval]], required: int) -> bool:
    """A long enough declared break, or a long enough idle gap between shifts."""
    if any(s.break_minutes >= required for s, _ in occupied):
        return True
    for (_, cur), (_, nxt) in zip(occupied, occupied[1:]):
        if nxt.start - cur.end >= required:
            return True
    return False


def _overlap_conflict(employee_id: str, day: dt.date, a: Shift, b: Shift) -> Conflict:
    first, second = sorted((a.id, b.id))
    return Conflict(
        id=f"overlap-{employee_id}-{day.isoformat()}-{first}-{second}",
        severity=Severity.ERROR,
        category=ConflictCategory.OVERLAP,
        message=(
            f"Employee {employee_id} has overlapping shifts on {day.isoformat()}: "
            f"{a.label()} and {b.label()}."
        ),
        date=day,
        employee_ids=(employee_id,),
        shift_ids=(first, second),
    )


class DailyLimitRule(Rule):
    """
    Daily hour cap, same-day overlaps, mandatory break and structural checks
    for every employee present in the pass.

    Config used:
      MAX_DAILY_HOURS
      MANDATORY_BREAK_AFTER_HOURS / MANDATORY_BREAK_MINUTES
      HOURS_KINDS (through the classifier)
    """

    order = 20
    name = "DailyLimit"

    def __init__(self, ctx, **settings):
        super().__init__(ctx, **settings)
        self.results: dict[str, DailyLimitResult] = {}

    def check(self) -> list[Conflict]:
        conflicts: list[Conflict] = []
        for employee_id, shifts in self.ctx.shifts_by_employee().items():
            res = check_daily_limits(
                employee_id, shifts, self.ctx.cfg, self.ctx.classifier
            )
            self.results[employee_id] = res
            conflicts.extend(res.conflicts)
        return conflicts

    def report_descriptors(self) -> list[dict[str, Any]]:
        return [
            {
                "rule": self.name,
                "employee_id": employee_id,
                "valid": res.valid,
                "daily_hours": {d.isoformat(): h for d, h in res.daily_hours.items()},
            }
            for employee_id, res in self.results.items()
        ]
