from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.ERROR: 0, Severity.WARNING: 1, Severity.INFO: 2}


class ConflictCategory(str, Enum):
    DAILY_LIMIT = "daily_limit"
    OVERLAP = "overlap"
    MISSING_BREAK = "missing_break"
    REST_PERIOD = "rest_period"
    COVERAGE = "coverage"
    STRUCTURAL = "structural"


@dataclass(frozen=True)
class Conflict:
    """
    A reported rule violation or advisory note.

    `message` carries every specific for display; `category`, `date` and
    `employee_ids` are the machine-readable handles.
    """

    id: str
    severity: Severity
    category: ConflictCategory
    message: str
    date: dt.date
    employee_ids: tuple[str, ...] = ()
    shift_ids: tuple[str, ...] = ()

    @property
    def blocks_save(self) -> bool:
        return self.severity is Severity.ERROR

    def sort_key(self) -> tuple[dt.date, int, str, str]:
        return (self.date, self.severity.rank, self.category.value, self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "date": self.date.isoformat(),
            "employee_ids": list(self.employee_ids),
            "shift_ids": list(self.shift_ids),
        }


def order_conflicts(conflicts: Iterable[Conflict]) -> list[Conflict]:
    """Sort by (date, severity, category, id) and drop repeated ids."""
    seen: set[str] = set()
    out: list[Conflict] = []
    for c in sorted(conflicts, key=Conflict.sort_key):
        if c.id in seen:
            continue
        seen.add(c.id)
        out.append(c)
    return out


@dataclass(frozen=True)
class ComplianceScore:
    """0-100 score: 100 minus 15 per error, 5 per warning, 1 per info."""

    score: int
    label: str
    errors: int
    warnings: int
    infos: int

    @classmethod
    def from_conflicts(cls, conflicts: Iterable[Conflict]) -> "ComplianceScore":
        counts = {s: 0 for s in Severity}
        for c in conflicts:
            counts[c.severity] += 1
        penalty = (
            counts[Severity.ERROR] * 15
            + counts[Severity.WARNING] * 5
            + counts[Severity.INFO] * 1
        )
        score = max(0, min(100, 100 - penalty))
        return cls(
            score=score,
            label=_score_label(score),
            errors=counts[Severity.ERROR],
            warnings=counts[Severity.WARNING],
            infos=counts[Severity.INFO],
        )


def _score_label(score: int) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Needs attention"
    if score >= 30:
        return "Non-compliant"
    return "Critical"


@dataclass(frozen=True)
class EmployeeSummary:
    employee_id: str
    total_hours: float
    days_worked: int
    contract_hours: float | None
    longest_rest_hours: float | None
    rest_period_valid: bool
    daily_limit_valid: bool
    conflicts: tuple[Conflict, ...] = ()

    @property
    def contract_delta_hours(self) -> float | None:
        if self.contract_hours is None:
            return None
        return self.total_hours - self.contract_hours


@dataclass(frozen=True)
class ValidationResult:
    conflicts: list[Conflict]
    pharmacist_coverage_percent: int
    employee_summaries: dict[str, EmployeeSummary] = field(default_factory=dict)
    descriptors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity is Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity is Severity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(1 for c in self.conflicts if c.severity is Severity.INFO)

    @property
    def can_save(self) -> bool:
        """Only error-severity conflicts block saving."""
        return self.error_count == 0

    @property
    def compliance(self) -> ComplianceScore:
        return ComplianceScore.from_conflicts(self.conflicts)

    def by_category(self, category: ConflictCategory | str) -> list[Conflict]:
        cat = ConflictCategory(category)
        return [c for c in self.conflicts if c.category is cat]

    def for_employee(self, employee_id: str) -> list[Conflict]:
        return [c for c in self.conflicts if employee_id in c.employee_ids]
