from __future__ import annotations

from pathlib import Path
from typing import Iterable

from shiftcheck.classifier import ShiftClassifier
from shiftcheck.config import ValidationConfig
from shiftcheck.conflicts import ValidationResult
from shiftcheck.shift import Shift
from shiftcheck.staff import Employee

from .frames import conflicts_frame, coverage_frame, hours_frame
from .plots import plot_daily_hours, plot_slot_coverage
from .text_report import render_text_report


class Reporter:
    """High-level orchestrator: prints the text report, exports tables and plots."""

    def __init__(
        self,
        cfg: ValidationConfig,
        num_print_examples: int = 10,
        enable_plots: bool = True,
        out_dir: Path | str = "outputs",
    ) -> None:
        self.cfg = cfg
        self.classifier = ShiftClassifier.from_config(cfg)
        self.num_print_examples = num_print_examples
        self.enable_plots = enable_plots
        self.out_dir = Path(out_dir)

    def report(
        self,
        result: ValidationResult,
        shifts: Iterable[Shift] = (),
        employees: Iterable[Employee] = (),
    ) -> None:
        """Render textual report, CSV exports and (optional) plots after validating."""
        shifts = list(shifts)
        employees = list(employees)
        render_text_report(
            result,
            shifts,
            employees,
            num_print_examples=self.num_print_examples,
            classifier=self.classifier,
        )
        self.export_tables(result, shifts, employees)
        if not self.enable_plots:
            return
        plot_slot_coverage(result, out_dir=self.out_dir)
        if shifts:
            plot_daily_hours(
                hours_frame(shifts, employees, classifier=self.classifier),
                self.cfg.MAX_DAILY_HOURS,
                out_dir=self.out_dir,
            )

    def export_tables(
        self,
        result: ValidationResult,
        shifts: list[Shift],
        employees: list[Employee],
    ) -> None:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        conflicts_frame(result).to_csv(self.out_dir / "conflicts.csv", index=False)
        coverage_frame(result).to_csv(self.out_dir / "slot_coverage.csv", index=False)
        if shifts:
            hours = hours_frame(shifts, employees, classifier=self.classifier)
            hours.to_csv(self.out_dir / "daily_hours.csv")
