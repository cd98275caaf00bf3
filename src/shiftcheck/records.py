# src/shiftcheck/records.py
from __future__ import annotations

import datetime as dt
import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from shiftcheck.classifier import ShiftKind
from shiftcheck.config import ValidationConfig
from shiftcheck.exceptions import InvalidRecordError
from shiftcheck.opening_hours import DayOpeningHours, OpeningHoursWeek, TimeSlot
from shiftcheck.rules.helpers import monday_week
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee, EmployeeCategory
from shiftcheck.timeutils import parse_date

logger = logging.getLogger(__name__)

_WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}

_SHIFT_REQUIRED = ("id", "employee_id", "date", "start_time", "end_time")


def _require(raw: Mapping[str, Any], keys: Iterable[str], kind: str) -> None:
    missing = [k for k in keys if raw.get(k) in (None, "")]
    if missing:
        ident = raw.get("id", "?")
        raise InvalidRecordError(kind, f"{ident}: missing {', '.join(missing)}.")


def shift_from_record(raw: Mapping[str, Any]) -> Shift:
    """
    Build a Shift from a persistence-layer row.

    Accepts `type`/`shift_type` and `break_minutes`/`break_duration`. Times are
    kept as given, so a malformed "HH:MM" surfaces later as a structural
    conflict rather than here.
    """
    if not isinstance(raw, Mapping):
        raise TypeError("Each shift entry must be an object/dict.")
    _require(raw, _SHIFT_REQUIRED, "shift")

    break_raw = raw.get("break_minutes", raw.get("break_duration", 0))
    try:
        break_minutes = int(break_raw or 0)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(
            "shift", f"{raw['id']}: break must be an integer, got {break_raw!r}."
        ) from exc

    return Shift(
        id=str(raw["id"]),
        employee_id=str(raw["employee_id"]),
        date=raw["date"],
        start_time=str(raw["start_time"]),
        end_time=str(raw["end_time"]),
        break_minutes=break_minutes,
        type=raw.get("type") or raw.get("shift_type") or "regular",
        status=raw.get("status") or "draft",
        organization_id=str(raw.get("organization_id", "")),
        notes=raw.get("notes"),
    )


def employee_from_record(raw: Mapping[str, Any]) -> Employee:
    if not isinstance(raw, Mapping):
        raise TypeError("Each employee entry must be an object/dict.")
    _require(raw, ("id", "category"), "employee")

    name = raw.get("name")
    if not name:
        name = " ".join(
            str(p) for p in (raw.get("first_name"), raw.get("last_name")) if p
        )
    try:
        return Employee(
            id=str(raw["id"]),
            name=str(name),
            category=raw["category"],
            contract_hours=raw.get("contract_hours", 35.0),
            is_active=bool(raw.get("is_active", True)),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError("employee", f"{raw['id']}: {exc}") from exc


def _weekday_key(key: Any) -> int:
    if isinstance(key, str) and key.strip().lower() in _WEEKDAYS:
        return _WEEKDAYS[key.strip().lower()]
    try:
        return int(key)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(
            "opening_hours", f"unknown weekday key {key!r}."
        ) from exc


def _slot(raw: Any) -> TimeSlot:
    if isinstance(raw, Mapping):
        return TimeSlot(str(raw["start"]), str(raw["end"]))
    start, end = raw
    return TimeSlot(str(start), str(end))


def opening_hours_from_record(raw: Mapping[Any, Any] | Sequence[Any]) -> OpeningHoursWeek:
    """
    Opening hours keyed by weekday: 0-6 (as int or str) or English day names.

    A list of seven entries is read Monday first. Each day is either
    `{"is_open": bool, "slots": [...]}` or a bare list of slots; slots are
    `{"start": "08:30", "end": "12:30"}` objects or `["08:30", "12:30"]` pairs.
    """
    if isinstance(raw, Mapping):
        items = [(_weekday_key(k), v) for k, v in raw.items()]
    elif isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        items = list(enumerate(raw))
    else:
        raise TypeError("Opening hours must be an object keyed by weekday or a list.")

    days: dict[int, DayOpeningHours] = {}
    try:
        for weekday, day in items:
            if isinstance(day, Mapping):
                slots = tuple(_slot(s) for s in day.get("slots") or ())
                is_open = bool(day.get("is_open", bool(slots)))
            else:
                slots = tuple(_slot(s) for s in day or ())
                is_open = bool(slots)
            days[weekday] = DayOpeningHours(is_open=is_open, slots=slots)
        return OpeningHoursWeek(days=days)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidRecordError("opening_hours", str(exc)) from exc


def config_from_record(raw: Mapping[str, Any] | None) -> ValidationConfig:
    """ValidationConfig from a mapping of UPPER_CASE field names; unknown keys are rejected."""
    if not raw:
        return ValidationConfig()
    known = {f.name for f in fields(ValidationConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}.")

    values: dict[str, Any] = dict(raw)
    if "QUALIFYING_CATEGORIES" in values:
        values["QUALIFYING_CATEGORIES"] = frozenset(
            EmployeeCategory(c) for c in values["QUALIFYING_CATEGORIES"]
        )
    for attr in ("HOURS_KINDS", "COVERAGE_KINDS"):
        if attr in values:
            values[attr] = frozenset(ShiftKind(k) for k in values[attr])
    return ValidationConfig(**values).validate()


def coerce_shifts(items: Iterable[Shift | Mapping[str, Any]]) -> list[Shift]:
    return [s if isinstance(s, Shift) else shift_from_record(s) for s in items]


def coerce_employees(items: Iterable[Employee | Mapping[str, Any]]) -> list[Employee]:
    return [e if isinstance(e, Employee) else employee_from_record(e) for e in items]


def coerce_opening_hours(
    value: OpeningHoursWeek | Mapping[Any, Any] | Sequence[Any] | None,
) -> OpeningHoursWeek | None:
    if value is None or isinstance(value, OpeningHoursWeek):
        return value
    return opening_hours_from_record(value)


@dataclass
class Payload:
    """Everything one `validate_week` call needs, as read from disk."""

    shifts: list[Shift]
    employees: list[Employee]
    week_dates: list[dt.date]
    opening_hours: OpeningHoursWeek | None
    config: ValidationConfig


def load_payload(path: str | Path) -> Payload:
    """
    Load a week to validate from a JSON file.

    Expected keys: `shifts`, `employees`, `opening_hours`, and either
    `week_dates` (list of ISO dates) or `week_start` (the Monday). `config`
    is optional and overrides ValidationConfig defaults.
    """
    file_path = Path(path).expanduser()
    if file_path.suffix.lower() != ".json":
        raise ValueError("load_payload expects a path to a .json file.")
    if not file_path.exists():
        raise FileNotFoundError(f"Payload JSON file not found: {file_path}")

    try:
        data = json.loads(file_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {file_path}") from exc
    if not isinstance(data, Mapping):
        raise TypeError("Payload JSON must be an object.")

    if data.get("week_dates"):
        week_dates = sorted({parse_date(d) for d in data["week_dates"]})
    elif data.get("week_start"):
        week_dates = monday_week(parse_date(data["week_start"]))
    else:
        raise ValueError("Payload must contain 'week_dates' or 'week_start'.")

    raw_hours = data.get("opening_hours")
    payload = Payload(
        shifts=coerce_shifts(data.get("shifts") or []),
        employees=coerce_employees(data.get("employees") or []),
        week_dates=week_dates,
        opening_hours=coerce_opening_hours(raw_hours) if raw_hours else None,
        config=config_from_record(data.get("config")),
    )
    logger.debug(
        "Loaded %s: %d shifts, %d employees, %s..%s",
        file_path,
        len(payload.shifts),
        len(payload.employees),
        week_dates[0],
        week_dates[-1],
    )
    return payload
