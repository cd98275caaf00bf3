from __future__ import annotations

from .frames import conflicts_frame, coverage_frame, hours_frame
from .plots import plot_daily_hours, plot_slot_coverage
from .reporter import Reporter
from .text_report import render_text_report

__all__ = [
    "Reporter",
    "conflicts_frame",
    "coverage_frame",
    "hours_frame",
    "plot_daily_hours",
    "plot_slot_coverage",
    "render_text_report",
]
