from __future__ import annotations

import datetime as dt
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from shiftcheck.classifier import ShiftClassifier
from shiftcheck.config import ValidationConfig
from shiftcheck.conflicts import Conflict, ConflictCategory, Severity
from shiftcheck.opening_hours import OpeningHoursWeek, TimeSlot
from shiftcheck.rules.base import Rule
from shiftcheck.rules.helpers import resolve_interval
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee
from shiftcheck.timeutils import Interval, minutes_to_time, to_minutes

WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class SlotCoverage:
    """Coverage of one opening slot on one date."""

    date: dt.date
    start: str
    end: str
    covered_minutes: int
    total_minutes: int
    uncovered: tuple[tuple[str, str], ...] = ()

    @property
    def ratio(self) -> float:
        return self.covered_minutes / self.total_minutes if self.total_minutes else 1.0


@dataclass
class CoverageReport:
    conflicts: list[Conflict] = field(default_factory=list)
    slots: list[SlotCoverage] = field(default_factory=list)

    @property
    def percent(self) -> int:
        """Mean slot ratio as a whole percentage, halves rounded up; 100 when closed all week."""
        if not self.slots:
            return 100
        mean = sum(s.ratio for s in self.slots) / len(self.slots)
        return int(math.floor(mean * 100 + 0.5))


def qualifying_intervals(
    day_shifts: Iterable[Shift],
    employees: Mapping[str, Employee],
    cfg: ValidationConfig,
    classifier: ShiftClassifier,
) -> dict[str, list[Interval]]:
    """Sound coverage-kind intervals of active qualifying employees, keyed by employee."""
    out: dict[str, list[Interval]] = defaultdict(list)
    for shift in day_shifts:
        emp = employees.get(shift.employee_id)
        if emp is None or not emp.is_active:
            continue
        if emp.category not in cfg.QUALIFYING_CATEGORIES:
            continue
        if not classifier.counts_toward_coverage(shift):
            continue
        interval, reason = resolve_interval(shift)
        if reason is None:
            out[shift.employee_id].append(interval)  # type: ignore[arg-type]
    return dict(out)


def slot_coverage(
    day: dt.date,
    slot: TimeSlot,
    presence: Mapping[str, list[Interval]],
    cfg: ValidationConfig,
) -> SlotCoverage:
    """
    Walk the slot in COVERAGE_STEP_MINUTES steps; a step at t is covered when at
    least MIN_QUALIFYING_ROLE_COUNT distinct employees have start <= t < end.
    The last step is clipped to the slot end.
    """
    s0, s1 = slot.interval
    step = cfg.COVERAGE_STEP_MINUTES
    steps = np.arange(s0, s1, step)
    widths = np.minimum(steps + step, s1) - steps

    headcount = np.zeros(steps.shape, dtype=int)
    for intervals in presence.values():
        on = np.zeros(steps.shape, dtype=bool)
        for iv in intervals:
            on |= (steps >= iv.start) & (steps < iv.end)
        headcount += on
    covered = headcount >= cfg.MIN_QUALIFYING_ROLE_COUNT

    uncovered: list[tuple[str, str]] = []
    run_start: int | None = None
    for i, ok in enumerate(covered):
        if not ok and run_start is None:
            run_start = int(steps[i])
        elif ok and run_start is not None:
            uncovered.append((minutes_to_time(run_start), minutes_to_time(int(steps[i]))))
            run_start = None
    if run_start is not None:
        uncovered.append((minutes_to_time(run_start), minutes_to_time(s1)))

    return SlotCoverage(
        date=day,
        start=slot.start,
        end=slot.end,
        covered_minutes=int(widths[covered].sum()),
        total_minutes=int(s1 - s0),
        uncovered=tuple(uncovered),
    )


def check_coverage(
    window: Sequence[dt.date],
    shifts: Sequence[Shift],
    employees: Mapping[str, Employee],
    opening_hours: OpeningHoursWeek,
    cfg: ValidationConfig,
    classifier: ShiftClassifier,
) -> CoverageReport:
    report = CoverageReport()
    by_date: dict[dt.date, list[Shift]] = defaultdict(list)
    for shift in shifts:
        by_date[shift.date].append(shift)

    for day in sorted(set(window)):
        slots = opening_hours.for_weekday(day.weekday()).open_slots
        if not slots:
            continue
        presence = qualifying_intervals(by_date.get(day, []), employees, cfg, classifier)
        present_shift_ids = tuple(
            sorted(
                s.id
                for s in by_date.get(day, [])
                if s.employee_id in presence and classifier.counts_toward_coverage(s)
            )
        )
        for slot in slots:
            cov = slot_coverage(day, slot, presence, cfg)
            report.slots.append(cov)
            for start, end in cov.uncovered:
                report.conflicts.append(
                    _coverage_conflict(day, start, end, cfg, present_shift_ids)
                )
    return report


def _coverage_conflict(
    day: dt.date,
    start: str,
    end: str,
    cfg: ValidationConfig,
    shift_ids: tuple[str, ...],
) -> Conflict:
    minutes = to_minutes(end) - to_minutes(start)
    need = cfg.MIN_QUALIFYING_ROLE_COUNT
    who = "No pharmacist" if need == 1 else f"Fewer than {need} pharmacists"
    return Conflict(
        id=f"coverage-{day.isoformat()}-{start}",
        severity=Severity.WARNING,
        category=ConflictCategory.COVERAGE,
        message=(
            f"{who} present on {WEEKDAY_NAMES[day.weekday()]} {day.isoformat()} "
            f"from {start} to {end} ({minutes} min uncovered)."
        ),
        date=day,
        employee_ids=(),
        shift_ids=shift_ids,
    )


class CoverageRule(Rule):
    """
    Minimum count of qualifying roles (pharmacists) throughout every opening slot.

    Config used:
      MIN_QUALIFYING_ROLE_COUNT
      COVERAGE_STEP_MINUTES
      QUALIFYING_CATEGORIES
      COVERAGE_KINDS (through the classifier)
    """

    order = 60
    name = "Coverage"

    def __init__(self, ctx, **settings):
        super().__init__(ctx, **settings)
        self.enabled = ctx.opening_hours is not None
        self.report: CoverageReport = CoverageReport()

    def check(self) -> list[Conflict]:
        if not self.enabled:
            return []
        self.report = check_coverage(
            self.ctx.window,
            self.ctx.shifts,
            self.ctx.employees,
            self.ctx.opening_hours,  # type: ignore[arg-type]
            self.ctx.cfg,
            self.ctx.classifier,
        )
        return list(self.report.conflicts)

    def report_descriptors(self) -> list[dict[str, Any]]:
        if not self.enabled:
            return []
        return [
            {
                "rule": self.name,
                "pharmacist_coverage_percent": self.report.percent,
                "slots": [
                    {
                        "date": s.date.isoformat(),
                        "start": s.start,
                        "end": s.end,
                        "covered_minutes": s.covered_minutes,
                        "total_minutes": s.total_minutes,
                        "ratio": s.ratio,
                        "uncovered": [list(r) for r in s.uncovered],
                    }
                    for s in self.report.slots
                ],
            }
        ]
