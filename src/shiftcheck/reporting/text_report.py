from __future__ import annotations

from typing import Iterable

import pandas as pd

from shiftcheck.classifier import ShiftClassifier
from shiftcheck.conflicts import Severity, ValidationResult
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee

from .frames import conflicts_frame, coverage_frame, hours_frame

_SEVERITY_MARK = {
    Severity.ERROR: "✖",
    Severity.WARNING: "⚠️",
    Severity.INFO: "ℹ",
}


def _fmt_hours(x: float | None, nd: int = 2) -> str:
    if x is None or pd.isna(x):
        return "n/a"
    return f"{float(x):.{nd}f}h"


def render_text_report(
    result: ValidationResult,
    shifts: Iterable[Shift] = (),
    employees: Iterable[Employee] = (),
    *,
    num_print_examples: int = 10,
    classifier: ShiftClassifier | None = None,
) -> None:
    """
    Print a human-readable summary of one validation pass to stdout.

    Pass the `classifier` the pass ran with so the hours table counts the same
    shift kinds as the per-employee summary.
    """
    score = result.compliance
    print(
        f"Compliance: {score.score}/100 ({score.label}) | "
        f"errors={result.error_count} | warnings={result.warning_count} | "
        f"info={result.info_count}"
    )
    print("Schedule can be saved." if result.can_save else "Saving blocked by errors.")
    print(f"Pharmacist coverage: {result.pharmacist_coverage_percent}%")

    if not result.conflicts:
        print("\nNo conflicts.")
    else:
        print(f"\nConflicts (first {num_print_examples} of {len(result.conflicts)}):")
        for c in result.conflicts[:num_print_examples]:
            print(f"  {_SEVERITY_MARK[c.severity]} [{c.category.value}] {c.message}")
        if len(result.conflicts) > num_print_examples:
            print(f"  … {len(result.conflicts) - num_print_examples} more")

        by_cat = conflicts_frame(result).groupby(["category", "severity"]).size()
        print("\nConflicts by category:")
        print(by_cat.to_string())

    if result.employee_summaries:
        print("\nPer-employee summary:")
        for emp_id, summary in result.employee_summaries.items():
            flags = []
            if not summary.daily_limit_valid:
                flags.append("daily limit")
            if not summary.rest_period_valid:
                flags.append("weekly rest")
            print(
                f"  {emp_id}: {_fmt_hours(summary.total_hours)} over "
                f"{summary.days_worked} day(s) | contract {_fmt_hours(summary.contract_hours)}"
                f" | delta {_fmt_hours(summary.contract_delta_hours)}"
                f" | longest rest {_fmt_hours(summary.longest_rest_hours, nd=1)}"
                + (f" | failing: {', '.join(flags)}" if flags else "")
            )

    shifts = list(shifts)
    if shifts:
        table = hours_frame(shifts, employees, classifier=classifier)
        print("\nEffective hours per day:")
        print(table.round(2).to_string())

    cov = coverage_frame(result)
    gaps = cov[cov["ratio"] < 1.0]
    if not cov.empty:
        if gaps.empty:
            print("\nEvery opening slot has pharmacist presence throughout.")
        else:
            print("\nOpening slots with pharmacist gaps:")
            print(
                gaps.assign(date=gaps["date"].dt.strftime("%a %Y-%m-%d"))
                .drop(columns=["total_minutes"])
                .to_string(index=False)
            )
