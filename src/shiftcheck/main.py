from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from shiftcheck.conflicts import ValidationResult
from shiftcheck.engine import validate_week
from shiftcheck.records import load_payload
from shiftcheck.reporting import Reporter

DEFAULT_PAYLOAD_JSON = Path(__file__).resolve().parents[1] / "example_week.json"


def run_validation(
    path: str | Path = DEFAULT_PAYLOAD_JSON,
    reporter: Reporter | None = None,
    enable_reporting: bool = True,
    enable_plots: bool = True,
) -> ValidationResult:
    """
    Load a week from JSON, validate it, and optionally report on it.

    Parameters
    ----------
    path:
        JSON payload (see `shiftcheck.records.load_payload`). Defaults to
        `src/example_week.json`.
    reporter:
        Custom reporter instance. When omitted and `enable_reporting` is True,
        a default `Reporter` built from the payload config is used.
    enable_reporting:
        When False, nothing is printed or written.
    enable_plots:
        Passed to the default reporter.

    Returns
    -------
    ValidationResult
    """
    payload = load_payload(path)
    result = validate_week(
        payload.shifts,
        payload.employees,
        payload.week_dates,
        payload.opening_hours,
        payload.config,
    )
    if enable_reporting:
        active = reporter or Reporter(payload.config, enable_plots=enable_plots)
        active.report(result, payload.shifts, payload.employees)
    return result


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="shiftcheck",
        description="Validate one week of pharmacy shifts against labour and coverage rules.",
    )
    parser.add_argument(
        "payload",
        nargs="?",
        default=str(DEFAULT_PAYLOAD_JSON),
        help="path to a JSON payload (default: bundled example week)",
    )
    parser.add_argument("--no-plots", action="store_true", help="skip matplotlib charts")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    result = run_validation(args.payload, enable_plots=not args.no_plots)
    return 0 if result.can_save else 1


if __name__ == "__main__":
    raise SystemExit(main())
