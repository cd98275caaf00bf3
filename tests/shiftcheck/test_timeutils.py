from __future__ import annotations

from datetime import date, datetime

import pytest

from shiftcheck.exceptions import MalformedTimeError
from shiftcheck.timeutils import (
    Interval,
    effective_hours,
    format_hours,
    gap_hours,
    minutes_to_time,
    overlaps,
    parse_date,
    to_minutes,
)


@pytest.mark.parametrize(
    "value, expected",
    [("00:00", 0), ("08:30", 510), ("08:05", 485), ("19:30:00", 1170), ("24:00", 1440)],
)
def test_to_minutes_parses_hh_mm(value: str, expected: int) -> None:
    assert to_minutes(value) == expected


@pytest.mark.parametrize("value", ["", "8h30", "8:30", " 08:30", "08:30 ", "25:00", "12:60", "24:15", "ab:cd", None])
def test_to_minutes_rejects_malformed(value) -> None:
    with pytest.raises(MalformedTimeError) as info:
        to_minutes(value)
    assert info.value.value == value
    assert isinstance(info.value, ValueError)


def test_minutes_to_time_formats_end_of_day() -> None:
    assert minutes_to_time(510) == "08:30"
    assert minutes_to_time(1440) == "24:00"


def test_effective_hours_subtracts_break() -> None:
    assert effective_hours("08:30", "19:30", 60) == pytest.approx(10.0)
    assert effective_hours("09:00", "12:00", 0) == pytest.approx(3.0)


def test_effective_hours_is_zero_for_inverted_or_oversized_break() -> None:
    assert effective_hours("19:00", "08:30", 0) == 0
    assert effective_hours("09:00", "10:00", 90) == 0


def test_overlaps_is_symmetric_and_ignores_touching_endpoints() -> None:
    a, b = Interval(480, 720), Interval(600, 900)
    assert overlaps(a, b) and overlaps(b, a)
    touching = Interval(720, 900)
    assert not overlaps(a, touching)
    assert not overlaps(touching, a)


def test_parse_date_accepts_common_forms() -> None:
    assert parse_date("2024-01-08") == date(2024, 1, 8)
    assert parse_date("2024-01-08T10:00:00") == date(2024, 1, 8)
    assert parse_date(datetime(2024, 1, 8, 10)) == date(2024, 1, 8)
    with pytest.raises(ValueError):
        parse_date("08/01/2024")
    with pytest.raises(TypeError):
        parse_date(20240108)


def test_gap_hours_spans_days() -> None:
    assert gap_hours("2024-01-08", "19:00", "2024-01-09", "08:00") == pytest.approx(13.0)
    assert gap_hours(date(2024, 1, 8), 1170, date(2024, 1, 8), 1200) == pytest.approx(0.5)


def test_format_hours() -> None:
    assert format_hours(7.75) == "7h45"
    assert format_hours(10) == "10h00"
    assert format_hours(-0.5) == "-0h30"
