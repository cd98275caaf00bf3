# src/shiftcheck/rules/base.py
from __future__ import annotations

import datetime as dt
from abc import ABC
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional, Type

if TYPE_CHECKING:
    from shiftcheck.classifier import ShiftClassifier
    from shiftcheck.config import ValidationConfig
    from shiftcheck.opening_hours import OpeningHoursWeek
    from shiftcheck.shift import Shift
    from shiftcheck.staff import Employee

from shiftcheck.conflicts import Conflict


@dataclass
class ValidationContext:
    """Inputs shared by every rule of one validation pass."""

    cfg: ValidationConfig
    classifier: ShiftClassifier
    shifts: list[Shift]
    window: list[dt.date]
    employees: Mapping[str, Employee] = field(default_factory=dict)
    opening_hours: Optional[OpeningHoursWeek] = None

    def shifts_by_employee(self) -> dict[str, list[Shift]]:
        grouped: dict[str, list[Shift]] = defaultdict(list)
        for shift in self.shifts:
            grouped[shift.employee_id].append(shift)
        return {e: grouped[e] for e in sorted(grouped)}


@dataclass
class RuleSpec:
    cls: Type["Rule"]
    order: int | None = None
    enabled: bool = True
    settings: dict[str, Any] = field(default_factory=dict)


class Rule(ABC):
    order: int = 100
    enabled: bool = True
    name: str = "Rule"

    def __init__(self, ctx: ValidationContext, **settings: Any) -> None:
        self.ctx: ValidationContext = ctx
        self.conflicts: list[Conflict] = []

    def check(self) -> list[Conflict]:
        return []

    def report_descriptors(self) -> list[dict[str, Any]]:
        """Return zero or more JSON-serializable descriptors for summaries and reports.
        Only meaningful after check() ran. Default: []."""
        return []
