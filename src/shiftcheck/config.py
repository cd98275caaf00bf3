from __future__ import annotations

from dataclasses import dataclass

from shiftcheck.classifier import ShiftKind
from shiftcheck.staff import PHARMACIST_CATEGORIES, EmployeeCategory


@dataclass(frozen=True)
class ValidationConfig:

    ### DAILY LIMITS ###

    # Effective hours per employee per day; exactly at the cap is compliant
    MAX_DAILY_HOURS: float = 10

    # A break of MANDATORY_BREAK_MINUTES is due once the day exceeds this
    MANDATORY_BREAK_AFTER_HOURS: float = 6
    MANDATORY_BREAK_MINUTES: int = 20

    ### WEEKLY REST ###

    # Longest uninterrupted non-working window required per week
    MIN_WEEKLY_REST_HOURS: float = 35

    ### COVERAGE ###

    MIN_QUALIFYING_ROLE_COUNT: int = 1
    COVERAGE_STEP_MINUTES: int = 15
    QUALIFYING_CATEGORIES: frozenset[EmployeeCategory] = PHARMACIST_CATEGORIES

    ### CLASSIFICATION ###

    # Shift kinds summed into daily hours and counted as coverage presence
    HOURS_KINDS: frozenset[ShiftKind] = frozenset({ShiftKind.WORKABLE})
    COVERAGE_KINDS: frozenset[ShiftKind] = frozenset({ShiftKind.WORKABLE})

    def validate(self) -> "ValidationConfig":
        """
        Validate the config has sensible values before a validation pass.
        Returns self so callers can chain it.
        """
        if not (0 < self.MAX_DAILY_HOURS <= 24):
            raise ValueError("MAX_DAILY_HOURS must be in (0, 24].")
        if not (0 < self.MIN_WEEKLY_REST_HOURS <= 7 * 24):
            raise ValueError("MIN_WEEKLY_REST_HOURS must be in (0, 168].")
        if self.MIN_QUALIFYING_ROLE_COUNT < 0:
            raise ValueError("MIN_QUALIFYING_ROLE_COUNT must be non-negative.")
        if self.MANDATORY_BREAK_AFTER_HOURS < 0:
            raise ValueError("MANDATORY_BREAK_AFTER_HOURS must be non-negative.")
        if self.MANDATORY_BREAK_MINUTES < 0:
            raise ValueError("MANDATORY_BREAK_MINUTES must be non-negative.")
        if not (0 < self.COVERAGE_STEP_MINUTES <= 60):
            raise ValueError("COVERAGE_STEP_MINUTES must be in (0, 60].")
        for attr in ("HOURS_KINDS", "COVERAGE_KINDS"):
            unknown = [k for k in getattr(self, attr) if not isinstance(k, ShiftKind)]
            if unknown:
                raise ValueError(f"{attr} contains unknown shift kinds: {unknown}.")
        for cat in self.QUALIFYING_CATEGORIES:
            if not isinstance(cat, EmployeeCategory):
                raise ValueError(f"Unknown employee category {cat!r}.")
        return self

    @property
    def max_daily_minutes(self) -> float:
        return self.MAX_DAILY_HOURS * 60

    @property
    def break_threshold_minutes(self) -> float:
        return self.MANDATORY_BREAK_AFTER_HOURS * 60
