# src/shiftcheck/engine.py
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import replace
from typing import Any, Iterable, Mapping, Sequence, Type

from shiftcheck.classifier import ShiftClassifier
from shiftcheck.config import ValidationConfig
from shiftcheck.conflicts import (
    Conflict,
    EmployeeSummary,
    ValidationResult,
    order_conflicts,
)
from shiftcheck.opening_hours import OpeningHoursWeek
from shiftcheck.records import coerce_employees, coerce_opening_hours, coerce_shifts
from shiftcheck.rules.base import Rule, RuleSpec, ValidationContext
from shiftcheck.rules.helpers import monday_week
from shiftcheck.rules.registry import candidate_rule_specs, normalize_rule_specs
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee
from shiftcheck.timeutils import parse_date

logger = logging.getLogger(__name__)


def run_rules(ctx: ValidationContext, specs: Sequence[RuleSpec]) -> list[Rule]:
    """Instantiate enabled rules in `order` and run their checks."""
    rules: list[Rule] = []
    for spec in specs:
        if not spec.enabled:
            continue
        rule = spec.cls(ctx, **spec.settings)
        if spec.order is not None:
            rule.order = spec.order
        rules.append(rule)
    rules.sort(key=lambda r: r.order)
    for rule in rules:
        rule.conflicts = rule.check()
    return rules


def validate_week(
    shifts: Iterable[Shift | Mapping[str, Any]],
    employees: Iterable[Employee | Mapping[str, Any]],
    week_dates: Iterable[dt.date | str],
    opening_hours: OpeningHoursWeek | Mapping[Any, Any] | None,
    config: ValidationConfig,
    *,
    rules: Sequence[RuleSpec | Type[Rule]] | None = None,
) -> ValidationResult:
    """
    Validate a whole week: daily limits, weekly rest and pharmacist coverage.

    Parameters
    ----------
    shifts:
        Shift records; those dated outside `week_dates` or cancelled are ignored.
    employees:
        The roster, used for role lookup (coverage) and contract hours.
    week_dates:
        The dates being validated, normally Monday to Sunday.
    opening_hours:
        Weekday (0 = Monday) opening slots.
    config:
        Thresholds; passed explicitly, there are no module-level defaults.
    rules:
        Optional rule classes/specs replacing the default set.

    Returns
    -------
    ValidationResult
        Ordered, de-duplicated conflicts plus the coverage percentage and
        per-employee summaries.
    """
    cfg = config.validate()
    window = _window(week_dates)
    roster = {e.id: e for e in coerce_employees(employees)}
    ctx = ValidationContext(
        cfg=cfg,
        classifier=ShiftClassifier.from_config(cfg),
        shifts=_in_window(coerce_shifts(shifts), window),
        window=window,
        employees=roster,
        opening_hours=coerce_opening_hours(opening_hours),
    )

    ran = run_rules(ctx, normalize_rule_specs(rules))
    conflicts = order_conflicts(c for r in ran for c in r.conflicts)
    descriptors = [d for r in ran for d in r.report_descriptors()]

    coverage = next(
        (d for d in descriptors if "pharmacist_coverage_percent" in d), None
    )
    result = ValidationResult(
        conflicts=conflicts,
        pharmacist_coverage_percent=(
            int(coverage["pharmacist_coverage_percent"]) if coverage else 100
        ),
        employee_summaries=_employee_summaries(ctx, conflicts, descriptors),
        descriptors=descriptors,
    )
    logger.debug(
        "validate_week %s..%s: %d shifts, %d conflicts (%d errors), coverage %d%%",
        window[0],
        window[-1],
        len(ctx.shifts),
        len(result.conflicts),
        result.error_count,
        result.pharmacist_coverage_percent,
    )
    return result


def validate_candidate(
    employee_id: str,
    candidate: Shift | Mapping[str, Any],
    existing_shifts: Iterable[Shift | Mapping[str, Any]],
    config: ValidationConfig,
    *,
    week_dates: Iterable[dt.date | str] | None = None,
) -> list[Conflict]:
    """
    Check a not-yet-saved shift for `employee_id` before it is persisted.

    The candidate replaces any existing shift with the same id (an edit or a
    drag-and-drop move) and is assigned to `employee_id`. Only the daily-limit
    and weekly-rest rules run, over the Monday-to-Sunday week containing the
    candidate (or `week_dates`), so the result matches what `validate_week`
    reports for this employee once the candidate is saved.

    Callers whose batch week does not start on Monday must pass the same
    `week_dates` they give `validate_week`; otherwise the weekly-rest windows
    differ and the two results can disagree.
    """
    cfg = config.validate()
    (cand,) = coerce_shifts([candidate])
    cand = replace(cand, employee_id=employee_id)
    window = _window(week_dates) if week_dates is not None else monday_week(cand.date)

    pool = [
        s
        for s in coerce_shifts(existing_shifts)
        if s.employee_id == employee_id and s.id != cand.id
    ]
    pool.append(cand)

    ctx = ValidationContext(
        cfg=cfg,
        classifier=ShiftClassifier.from_config(cfg),
        shifts=_in_window(pool, window),
        window=window,
    )
    ran = run_rules(ctx, candidate_rule_specs())
    conflicts = order_conflicts(c for r in ran for c in r.conflicts)
    logger.debug(
        "validate_candidate %s for %s on %s: %d conflicts",
        cand.id,
        employee_id,
        cand.date,
        len(conflicts),
    )
    return conflicts


def _window(week_dates: Iterable[dt.date | str]) -> list[dt.date]:
    window = sorted({parse_date(d) for d in week_dates})
    if not window:
        raise ValueError("week_dates must contain at least one date.")
    return window


def _in_window(shifts: Iterable[Shift], window: list[dt.date]) -> list[Shift]:
    days = set(window)
    return [s for s in shifts if s.date in days and not s.is_cancelled]


def _employee_summaries(
    ctx: ValidationContext,
    conflicts: list[Conflict],
    descriptors: list[dict[str, Any]],
) -> dict[str, EmployeeSummary]:
    daily: dict[str, dict[str, Any]] = {}
    rest: dict[str, dict[str, Any]] = {}
    for d in descriptors:
        if "daily_hours" in d:
            daily[d["employee_id"]] = d
        elif "longest_rest_hours" in d:
            rest[d["employee_id"]] = d

    ids = sorted(set(ctx.employees) | {s.employee_id for s in ctx.shifts})
    out: dict[str, EmployeeSummary] = {}
    for employee_id in ids:
        hours = daily.get(employee_id, {}).get("daily_hours", {})
        rests = [
            h
            for h in rest.get(employee_id, {}).get("longest_rest_hours", {}).values()
            if h is not None
        ]
        emp = ctx.employees.get(employee_id)
        out[employee_id] = EmployeeSummary(
            employee_id=employee_id,
            total_hours=float(sum(hours.values())),
            days_worked=len(hours),
            contract_hours=emp.contract_hours if emp is not None else None,
            longest_rest_hours=min(rests) if rests else None,
            rest_period_valid=rest.get(employee_id, {}).get("valid", True),
            daily_limit_valid=daily.get(employee_id, {}).get("valid", True),
            conflicts=tuple(c for c in conflicts if employee_id in c.employee_ids),
        )
    return out
