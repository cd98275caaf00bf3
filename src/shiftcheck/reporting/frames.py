from __future__ import annotations

import datetime as dt
from typing import Iterable, Sequence

import pandas as pd

from shiftcheck.classifier import ShiftClassifier
from shiftcheck.conflicts import Conflict, ValidationResult
from shiftcheck.exceptions import MalformedTimeError
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee
from shiftcheck.timeutils import effective_hours

CONFLICT_COLUMNS = [
    "date",
    "severity",
    "category",
    "employee_ids",
    "shift_ids",
    "message",
    "id",
]

COVERAGE_COLUMNS = [
    "date",
    "start",
    "end",
    "covered_minutes",
    "total_minutes",
    "ratio",
    "uncovered",
]


def conflicts_frame(conflicts: ValidationResult | Iterable[Conflict]) -> pd.DataFrame:
    """One row per conflict, in reporting order; id lists joined with commas."""
    items = conflicts.conflicts if isinstance(conflicts, ValidationResult) else conflicts
    rows = []
    for c in items:
        rows.append(
            {
                "date": pd.Timestamp(c.date),
                "severity": c.severity.value,
                "category": c.category.value,
                "employee_ids": ",".join(c.employee_ids),
                "shift_ids": ",".join(c.shift_ids),
                "message": c.message,
                "id": c.id,
            }
        )
    return pd.DataFrame(rows, columns=CONFLICT_COLUMNS)


def hours_frame(
    shifts: Iterable[Shift],
    employees: Iterable[Employee] = (),
    week_dates: Sequence[dt.date] | None = None,
    classifier: ShiftClassifier | None = None,
) -> pd.DataFrame:
    """
    Employee x date table of effective hours, plus `total` and, when the
    roster is given, `contract_hours` and `delta`.

    Per-shift hours come from `timeutils.effective_hours`. Cancelled shifts,
    shifts whose kind does not count toward hours, and shifts with malformed
    times are left out.
    """
    clf = classifier or ShiftClassifier()
    rows = []
    for s in shifts:
        if s.is_cancelled or not clf.counts_toward_hours(s):
            continue
        try:
            hours = effective_hours(s.start_time, s.end_time, s.break_minutes)
        except MalformedTimeError:
            continue
        rows.append({"employee_id": s.employee_id, "date": s.date, "hours": hours})

    if rows:
        table = pd.DataFrame(rows).pivot_table(
            index="employee_id",
            columns="date",
            values="hours",
            aggfunc="sum",
            fill_value=0.0,
        )
    else:
        table = pd.DataFrame(index=pd.Index([], name="employee_id"), dtype=float)
    roster = {e.id: e for e in employees}
    if week_dates is not None:
        table = table.reindex(columns=sorted(set(week_dates)), fill_value=0.0)
    if roster:
        table = table.reindex(index=sorted(set(table.index) | set(roster)), fill_value=0.0)
    table.columns = [d.isoformat() for d in table.columns]
    table.index.name = "employee_id"

    table["total"] = table.sum(axis=1)
    if roster:
        table["contract_hours"] = [
            roster[e].contract_hours if e in roster else float("nan")
            for e in table.index
        ]
        table["delta"] = table["total"] - table["contract_hours"]
    return table


def coverage_frame(result: ValidationResult) -> pd.DataFrame:
    """Per (date, opening slot) pharmacist coverage, read from the Coverage rule descriptor."""
    slots = [
        slot
        for d in result.descriptors
        if "pharmacist_coverage_percent" in d
        for slot in d.get("slots", [])
    ]
    rows = [
        {
            "date": pd.Timestamp(s["date"]),
            "start": s["start"],
            "end": s["end"],
            "covered_minutes": int(s["covered_minutes"]),
            "total_minutes": int(s["total_minutes"]),
            "ratio": float(s["ratio"]),
            "uncovered": "; ".join(f"{a}-{b}" for a, b in s["uncovered"]),
        }
        for s in slots
    ]
    return pd.DataFrame(rows, columns=COVERAGE_COLUMNS)
