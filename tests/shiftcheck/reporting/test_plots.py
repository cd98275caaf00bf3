from __future__ import annotations

from datetime import date
from pathlib import Path

import matplotlib

matplotlib.use("Agg", force=True)

from shiftcheck.conflicts import ValidationResult
from shiftcheck.engine import validate_week
from shiftcheck.opening_hours import OpeningHoursWeek
from shiftcheck.reporting.frames import hours_frame
from shiftcheck.reporting.plots import plot_daily_hours, plot_slot_coverage
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee, EmployeeCategory

MONDAY = date(2024, 1, 8)
EMPLOYEES = [Employee(id="e1", name="A", category=EmployeeCategory.ADJUNCT_PHARMACIST)]
SHIFTS = [
    Shift(id="s1", employee_id="e1", date=MONDAY, start_time="08:30", end_time="19:30", break_minutes=30),
]


def test_plot_slot_coverage_writes_png(tmp_path: Path, week, cfg):
    hours = OpeningHoursWeek.uniform([("08:30", "12:30"), ("14:00", "19:30")], weekdays=[0, 1])
    result = validate_week(SHIFTS, EMPLOYEES, week, hours, cfg)
    path = plot_slot_coverage(result, out_dir=tmp_path)
    assert path is not None and path.exists()


def test_plot_slot_coverage_skips_when_disabled_or_empty(tmp_path: Path):
    empty = ValidationResult(conflicts=[], pharmacist_coverage_percent=100)
    assert plot_slot_coverage(empty, out_dir=tmp_path) is None
    assert plot_slot_coverage(empty, enable_plot=False, out_dir=tmp_path) is None
    assert not any(tmp_path.iterdir())


def test_plot_daily_hours_writes_png(tmp_path: Path, week):
    table = hours_frame(SHIFTS, EMPLOYEES, week_dates=week)
    path = plot_daily_hours(table, 10, out_dir=tmp_path)
    assert path is not None and path.name == "daily_hours.png"
    assert path.exists()
