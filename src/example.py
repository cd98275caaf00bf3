"""
Module with example code for running the shift validator.

There are three ways to run the code:

1. Validate a small week defined via code and print the report.
2. Check a single candidate shift before it is saved (drag-and-drop style).
3. Validate a week pre-defined in a JSON file. Typical production use.

Usage via cli:
    python3 -m src.example --option 1
"""

from __future__ import annotations

import argparse
from datetime import date, timedelta
from pathlib import Path

from shiftcheck import (
    Employee,
    OpeningHoursWeek,
    Shift,
    ValidationConfig,
    validate_candidate,
    validate_week,
)
from shiftcheck.main import run_validation
from shiftcheck.reporting import Reporter

cfg = ValidationConfig(
    MAX_DAILY_HOURS=10,
    MANDATORY_BREAK_AFTER_HOURS=6,
    MANDATORY_BREAK_MINUTES=20,
    MIN_WEEKLY_REST_HOURS=35,
    MIN_QUALIFYING_ROLE_COUNT=1,
    COVERAGE_STEP_MINUTES=15,
)

MONDAY = date(2024, 1, 8)
WEEK = [MONDAY + timedelta(days=i) for i in range(7)]


def _example_week() -> tuple[list[Shift], list[Employee], OpeningHoursWeek]:
    employees = [
        Employee(id="e1", name="Claire", category="pharmacien_titulaire", contract_hours=39),
        Employee(id="e2", name="Lea", category="preparateur"),
    ]
    shifts = [
        Shift(
            id=f"s{i}",
            employee_id="e1",
            date=day,
            start_time="08:30",
            end_time="12:30",
        )
        for i, day in enumerate(WEEK[:6])
    ]
    shifts.append(
        Shift(
            id="s-long",
            employee_id="e2",
            date=WEEK[2],
            start_time="08:00",
            end_time="19:30",
            break_minutes=60,
        )
    )
    hours = OpeningHoursWeek.uniform([("08:30", "12:30"), ("14:00", "19:30")])
    return shifts, employees, hours


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run shift validation examples.")
    parser.add_argument(
        "--option",
        type=int,
        default=3,
        choices=(1, 2, 3),
        help="Example scenario to run (default: 3).",
    )
    return parser.parse_args()


def run_option(option: int) -> None:
    print(f"Running example code with option {option}")

    if option == 1:
        shifts, employees, hours = _example_week()
        result = validate_week(shifts, employees, WEEK, hours, cfg)
        Reporter(cfg, enable_plots=False).report(result, shifts, employees)

    # Moving a shift onto a day that already has one: only the moved
    # employee's daily and weekly-rest rules are checked.
    elif option == 2:
        shifts, _, _ = _example_week()
        candidate = Shift(
            id="s-new",
            employee_id="e1",
            date=WEEK[0],
            start_time="12:00",
            end_time="19:30",
        )
        for conflict in validate_candidate("e1", candidate, shifts, cfg):
            print(f"[{conflict.severity.value}] {conflict.message}")

    elif option == 3:
        run_validation(Path("src/example_week.json"))
    else:
        raise SystemExit(f"Unknown option {option}")


def main() -> None:
    args = parse_args()
    run_option(args.option)


if __name__ == "__main__":
    main()
