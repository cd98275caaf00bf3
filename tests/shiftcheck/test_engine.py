from __future__ import annotations

import logging
from datetime import date, timedelta

import pytest

from shiftcheck.config import ValidationConfig
from shiftcheck.conflicts import ConflictCategory, Severity
from shiftcheck.engine import validate_candidate, validate_week
from shiftcheck.opening_hours import OpeningHoursWeek
from shiftcheck.rules.base import RuleSpec
from shiftcheck.rules.daily_limit import DailyLimitRule
from shiftcheck.shift import Shift, ShiftStatus
from shiftcheck.staff import Employee, EmployeeCategory

EMPLOYEES = [
    Employee(id="e1", name="Claire", category=EmployeeCategory.TITULAR_PHARMACIST, contract_hours=39),
    Employee(id="e2", name="Lea", category=EmployeeCategory.DISPENSER),
    Employee(id="e3", name="Idle", category=EmployeeCategory.APPRENTICE, contract_hours=24),
]
HOURS = OpeningHoursWeek.uniform([("08:30", "12:30"), ("14:00", "19:30")])


def _shift(sid: str, emp: str, day: date, start: str, end: str, brk: int = 0, **kwargs) -> Shift:
    return Shift(
        id=sid,
        employee_id=emp,
        date=day,
        start_time=start,
        end_time=end,
        break_minutes=brk,
        **kwargs,
    )


@pytest.fixture
def shifts(week: list[date]) -> list[Shift]:
    out = [_shift(f"p{i}", "e1", week[i], "08:30", "19:30", brk=90) for i in range(6)]
    out += [_shift(f"d{i}", "e2", week[i], "08:00", "16:00", brk=30) for i in range(5)]
    # e2 works 11h on Wednesday and has an overlapping afternoon on Thursday
    out.append(_shift("d-extra", "e2", week[2], "16:00", "19:00"))
    out.append(_shift("d-overlap", "e2", week[3], "15:00", "18:00"))
    return out


def test_week_pass_reports_expected_conflicts(shifts, week, cfg) -> None:
    result = validate_week(shifts, EMPLOYEES, week, HOURS, cfg)

    ids = [c.id for c in result.conflicts]
    assert "daily-limit-e2-2024-01-10" in ids
    assert "overlap-e2-2024-01-11-d-overlap-d3" in ids
    assert not result.can_save
    assert result.pharmacist_coverage_percent == 100
    assert result.by_category(ConflictCategory.COVERAGE) == []

    keys = [c.sort_key() for c in result.conflicts]
    assert keys == sorted(keys)
    assert len(ids) == len(set(ids))


def test_week_pass_is_idempotent(shifts, week, cfg) -> None:
    first = validate_week(shifts, EMPLOYEES, week, HOURS, cfg)
    second = validate_week(list(reversed(shifts)), EMPLOYEES, week, HOURS, cfg)
    assert first.conflicts == second.conflicts
    assert first.pharmacist_coverage_percent == second.pharmacist_coverage_percent


def test_employee_summaries(shifts, week, cfg) -> None:
    summaries = validate_week(shifts, EMPLOYEES, week, HOURS, cfg).employee_summaries

    e1 = summaries["e1"]
    assert e1.total_hours == pytest.approx(6 * 9.5)
    assert e1.days_worked == 6
    assert e1.contract_delta_hours == pytest.approx(57 - 39)
    assert e1.rest_period_valid and e1.daily_limit_valid
    assert e1.longest_rest_hours == pytest.approx(37.0)

    e2 = summaries["e2"]
    assert not e2.daily_limit_valid
    assert all("e2" in c.employee_ids for c in e2.conflicts)

    idle = summaries["e3"]
    assert idle.total_hours == 0
    assert idle.days_worked == 0
    assert idle.contract_delta_hours == -24


def test_cancelled_and_out_of_window_shifts_are_ignored(week, cfg) -> None:
    shifts = [
        _shift("c", "e1", week[0], "08:00", "20:00", status=ShiftStatus.CANCELLED),
        _shift("late", "e1", week[-1] + timedelta(days=1), "08:00", "20:00"),
    ]
    result = validate_week(shifts, EMPLOYEES, week, None, cfg)
    assert result.conflicts == []
    assert result.pharmacist_coverage_percent == 100


def test_structural_shift_does_not_abort_pass(week, cfg) -> None:
    shifts = [
        _shift("night", "e2", week[0], "19:00", "08:30"),
        _shift("ok", "e1", week[0], "08:30", "12:30"),
    ]
    result = validate_week(shifts, EMPLOYEES, week, HOURS, cfg)
    structural = result.by_category("structural")
    assert [c.id for c in structural] == ["structural-night"]
    assert structural[0].severity is Severity.ERROR
    assert result.pharmacist_coverage_percent < 100


def test_plain_records_are_accepted(week, cfg) -> None:
    result = validate_week(
        [{"id": "s1", "employee_id": "e1", "date": "2024-01-08", "start_time": "08:00", "end_time": "19:00"}],
        [{"id": "e1", "name": "Claire", "category": "pharmacien_titulaire"}],
        [d.isoformat() for d in week],
        {"monday": [["08:30", "12:30"]]},
        cfg,
    )
    assert "daily-limit-e1-2024-01-08" in [c.id for c in result.conflicts]
    assert result.pharmacist_coverage_percent == 100


def test_custom_rule_set(shifts, week, cfg) -> None:
    result = validate_week(shifts, EMPLOYEES, week, HOURS, cfg, rules=[RuleSpec(cls=DailyLimitRule)])
    assert {c.category for c in result.conflicts} <= {
        ConflictCategory.DAILY_LIMIT,
        ConflictCategory.OVERLAP,
        ConflictCategory.MISSING_BREAK,
        ConflictCategory.STRUCTURAL,
    }


def test_invalid_inputs_raise(shifts, cfg) -> None:
    with pytest.raises(ValueError):
        validate_week(shifts, EMPLOYEES, [], HOURS, cfg)
    with pytest.raises(ValueError):
        validate_week(shifts, EMPLOYEES, ["2024-01-08"], HOURS, ValidationConfig(MAX_DAILY_HOURS=0))


def test_candidate_matches_week_pass(shifts, week, cfg) -> None:
    candidate = _shift("new", "ignored", week[4], "16:00", "19:30")
    inline = validate_candidate("e2", candidate, shifts, cfg)

    saved = shifts + [_shift("new", "e2", week[4], "16:00", "19:30")]
    batch = validate_week(saved, EMPLOYEES, week, HOURS, cfg)
    assert inline == batch.for_employee("e2")
    assert "daily-limit-e2-2024-01-12" in [c.id for c in inline]


def test_candidate_replaces_shift_with_same_id(shifts, week, cfg) -> None:
    edited = _shift("p0", "e1", week[0], "08:30", "12:30")
    assert validate_candidate("e1", edited, shifts, cfg) == []

    moved_onto_busy_day = _shift("p0", "e1", week[1], "12:00", "14:00")
    conflicts = validate_candidate("e1", moved_onto_busy_day, shifts, cfg)
    assert [c.category for c in conflicts] == [ConflictCategory.OVERLAP]
    assert conflicts[0].shift_ids == ("p0", "p1")


def test_candidate_seventh_day_breaks_weekly_rest(week, cfg) -> None:
    existing = [_shift(f"s{i}", "e1", week[i], "08:00", "18:00", brk=60) for i in range(6)]
    sunday = _shift("sun", "e1", week[6], "08:00", "18:00", brk=60)
    conflicts = validate_candidate("e1", sunday, existing, cfg)
    assert [c.id for c in conflicts] == ["rest-e1-2024-01-08"]


def test_candidate_follows_batch_week_that_starts_on_sunday(cfg) -> None:
    sunday_week = [date(2024, 1, 7) + timedelta(days=i) for i in range(7)]
    existing = [_shift(f"s{i}", "e1", sunday_week[i], "08:00", "18:00", brk=60) for i in range(6)]
    saturday = _shift("sat", "e1", sunday_week[6], "08:00", "18:00", brk=60)

    batch = validate_week(existing + [saturday], EMPLOYEES, sunday_week, None, cfg)
    inline = validate_candidate("e1", saturday, existing, cfg, week_dates=sunday_week)
    assert inline == batch.for_employee("e1")
    assert [c.id for c in inline] == ["rest-e1-2024-01-07"]

    # Without week_dates the Monday-to-Sunday week drops the Sunday shift
    assert validate_candidate("e1", saturday, existing, cfg) == []


def test_candidate_partial_window_gives_info(week, cfg) -> None:
    candidate = _shift("x", "e1", week[0], "08:00", "12:00")
    conflicts = validate_candidate("e1", candidate, [], cfg, week_dates=week[:3])
    assert [c.severity for c in conflicts] == [Severity.INFO]


def test_debug_logging(shifts, week, cfg, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="shiftcheck.engine"):
        validate_week(shifts, EMPLOYEES, week, HOURS, cfg)
    assert any("validate_week" in rec.getMessage() for rec in caplog.records)
