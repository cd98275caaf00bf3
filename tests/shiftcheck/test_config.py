from __future__ import annotations

import pytest

from shiftcheck.config import ValidationConfig


def test_defaults_validate_and_chain() -> None:
    cfg = ValidationConfig()
    assert cfg.validate() is cfg
    assert cfg.max_daily_minutes == 600
    assert cfg.break_threshold_minutes == 360


@pytest.mark.parametrize(
    "overrides",
    [
        {"MAX_DAILY_HOURS": 0},
        {"MAX_DAILY_HOURS": 25},
        {"MIN_WEEKLY_REST_HOURS": 200},
        {"MIN_QUALIFYING_ROLE_COUNT": -1},
        {"MANDATORY_BREAK_MINUTES": -5},
        {"COVERAGE_STEP_MINUTES": 0},
        {"HOURS_KINDS": frozenset({"workable"})},
        {"QUALIFYING_CATEGORIES": frozenset({"pharmacist"})},
    ],
)
def test_validate_rejects_bad_values(overrides) -> None:
    with pytest.raises(ValueError):
        ValidationConfig(**overrides).validate()
