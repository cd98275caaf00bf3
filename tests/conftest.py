# tests/conftest.py
from __future__ import annotations

import os
import random
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pytest

from shiftcheck.config import ValidationConfig


# -----------------------------
# Global, deterministic seeding
# -----------------------------
@pytest.fixture(autouse=True, scope="session")
def _seed_everything() -> None:
    """
    Make tests deterministic across runs. If you need a different seed in a test,
    override locally.
    """
    seed = int(os.environ.get("PYTEST_SEED", "1234"))
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


# -----------------------------
# Path helpers
# -----------------------------
@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]


# -----------------------------
# Domain defaults
# -----------------------------
@pytest.fixture
def cfg() -> ValidationConfig:
    return ValidationConfig()


@pytest.fixture
def week() -> list[date]:
    """Monday 2024-01-08 to Sunday 2024-01-14."""
    monday = date(2024, 1, 8)
    return [monday + timedelta(days=i) for i in range(7)]
