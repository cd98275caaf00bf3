from __future__ import annotations

from datetime import date
from pathlib import Path

import matplotlib

matplotlib.use("Agg", force=True)

import pandas as pd

from shiftcheck.classifier import ShiftKind
from shiftcheck.config import ValidationConfig
from shiftcheck.engine import validate_week
from shiftcheck.opening_hours import OpeningHoursWeek
from shiftcheck.reporting.reporter import Reporter
from shiftcheck.shift import Shift, ShiftType
from shiftcheck.staff import Employee, EmployeeCategory

MONDAY = date(2024, 1, 8)


def test_reporter_prints_and_exports(tmp_path: Path, capsys, week, cfg):
    employees = [Employee(id="e1", name="A", category=EmployeeCategory.TITULAR_PHARMACIST)]
    shifts = [Shift(id="s1", employee_id="e1", date=MONDAY, start_time="08:30", end_time="12:30")]
    hours = OpeningHoursWeek.uniform([("08:30", "12:30")], weekdays=[0])
    result = validate_week(shifts, employees, week, hours, cfg)

    Reporter(cfg, enable_plots=True, out_dir=tmp_path).report(result, shifts, employees)

    assert "Compliance: 100/100 (Excellent)" in capsys.readouterr().out
    for name in ("conflicts.csv", "slot_coverage.csv", "daily_hours.csv", "slot_coverage.png", "daily_hours.png"):
        assert (tmp_path / name).exists(), name


def test_reporter_without_plots(tmp_path: Path, week, cfg):
    result = validate_week([], [], week, None, cfg)
    Reporter(cfg, enable_plots=False, out_dir=tmp_path).report(result)
    assert (tmp_path / "conflicts.csv").exists()
    assert not list(tmp_path.glob("*.png"))


def test_exported_hours_follow_configured_hours_kinds(tmp_path: Path, capsys, week):
    cfg = ValidationConfig(HOURS_KINDS=frozenset({ShiftKind.WORKABLE, ShiftKind.TRAINING}))
    employees = [Employee(id="e1", name="A", category=EmployeeCategory.ADJUNCT_PHARMACIST)]
    shifts = [
        Shift(id="s1", employee_id="e1", date=MONDAY, start_time="08:00", end_time="12:00"),
        Shift(
            id="t1",
            employee_id="e1",
            date=MONDAY,
            start_time="13:00",
            end_time="16:00",
            type=ShiftType.TRAINING,
        ),
    ]
    result = validate_week(shifts, employees, week, None, cfg)

    Reporter(cfg, enable_plots=False, out_dir=tmp_path).report(result, shifts, employees)

    assert "e1: 7.00h over 1 day(s)" in capsys.readouterr().out
    hours = pd.read_csv(tmp_path / "daily_hours.csv", index_col=0)
    assert hours.loc["e1", "total"] == result.employee_summaries["e1"].total_hours == 7.0
