from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from shiftcheck.exceptions import InvalidRecordError, MalformedTimeError
from shiftcheck.shift import Shift, ShiftStatus, ShiftType


def test_shift_normalizes_fields() -> None:
    shift = Shift(
        id="s1",
        employee_id="e1",
        date="2024-01-08",  # type: ignore[arg-type]
        start_time="08:30",
        end_time="12:30",
        break_minutes=None,  # type: ignore[arg-type]
        type="morning",  # type: ignore[arg-type]
        status="published",  # type: ignore[arg-type]
    )
    assert shift.date == date(2024, 1, 8)
    assert shift.type is ShiftType.MORNING
    assert shift.status is ShiftStatus.PUBLISHED
    assert shift.break_minutes == 0
    assert shift.effective_hours == pytest.approx(4.0)
    assert shift.label() == "08:30-12:30"


def test_shift_requires_ids() -> None:
    with pytest.raises(InvalidRecordError):
        Shift(id="", employee_id="e1", date=date(2024, 1, 8), start_time="08:00", end_time="09:00")
    with pytest.raises(InvalidRecordError):
        Shift(id="s1", employee_id="", date=date(2024, 1, 8), start_time="08:00", end_time="09:00")


def test_shift_rejects_unknown_type() -> None:
    with pytest.raises(InvalidRecordError):
        Shift(
            id="s1",
            employee_id="e1",
            date=date(2024, 1, 8),
            start_time="08:00",
            end_time="09:00",
            type="night",  # type: ignore[arg-type]
        )


def test_malformed_time_is_kept_until_interval_is_read() -> None:
    shift = Shift(id="s1", employee_id="e1", date=date(2024, 1, 8), start_time="8h", end_time="12:00")
    with pytest.raises(MalformedTimeError):
        shift.interval


def test_cancelled_status_and_replace() -> None:
    shift = Shift(id="s1", employee_id="e1", date=date(2024, 1, 8), start_time="08:00", end_time="12:00")
    moved = replace(shift, employee_id="e2", status=ShiftStatus.CANCELLED)
    assert moved.employee_id == "e2"
    assert moved.is_cancelled
    assert not shift.is_cancelled
