from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from shiftcheck.conflicts import ValidationResult

from .frames import coverage_frame


def _save_and_show(fig: plt.Figure, filename: str, out_dir: Path | str = "outputs") -> Path:
    """Persist the plot under `out_dir` and show it."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / filename
    fig.savefig(path, dpi=fig.dpi, bbox_inches="tight")
    plt.show()
    return path


def plot_slot_coverage(
    result: ValidationResult,
    enable_plot: bool = True,
    out_dir: Path | str = "outputs",
) -> Path | None:
    """Bar chart of pharmacist coverage per opening slot, gaps highlighted."""
    if not enable_plot:
        return None
    df = coverage_frame(result)
    if df.empty:
        return None

    labels = [
        f"{d:%a %d}\n{s}-{e}" for d, s, e in zip(df["date"], df["start"], df["end"])
    ]
    pct = (df["ratio"] * 100).to_list()
    colors = ["tab:green" if r >= 1.0 else "tab:red" for r in df["ratio"]]

    fig, ax = plt.subplots(figsize=(max(7.5, 0.6 * len(df)), 4), dpi=150)
    ax.set_title(
        f"Pharmacist coverage per opening slot ({result.pharmacist_coverage_percent}% overall)"
    )
    ax.bar(range(len(df)), pct, color=colors, alpha=0.8, width=0.8, edgecolor="none")
    ax.axhline(100, color="0.6", linestyle="--", linewidth=0.8)
    ax.set_xticks(range(len(df)), labels, fontsize=7)
    ax.set_ylim(0, 105)
    ax.set_ylabel("Covered minutes (%)")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    fig.tight_layout()
    path = _save_and_show(fig, "slot_coverage.png", out_dir)
    plt.close(fig)
    return path


def plot_daily_hours(
    hours: pd.DataFrame,
    max_daily_hours: float,
    enable_plot: bool = True,
    out_dir: Path | str = "outputs",
) -> Path | None:
    """
    Heatmap of effective hours per employee and day (a `hours_frame` table),
    with cells above `max_daily_hours` outlined.
    """
    if not enable_plot:
        return None
    day_cols = [c for c in hours.columns if c not in ("total", "contract_hours", "delta")]
    if hours.empty or not day_cols:
        return None
    grid = hours[day_cols].to_numpy(dtype=float)

    fig, ax = plt.subplots(figsize=(7.5, 1.5 + 0.35 * len(hours)), dpi=150)
    im = ax.imshow(grid, aspect="auto", cmap="Blues", vmin=0, vmax=max(max_daily_hours, grid.max()))
    ax.set_xticks(range(len(day_cols)), day_cols, rotation=45, ha="right", fontsize=7)
    ax.set_yticks(range(len(hours)), [str(i) for i in hours.index], fontsize=7)
    for (r, c), val in pd.DataFrame(grid).stack().items():
        if val > max_daily_hours:
            ax.add_patch(
                plt.Rectangle((c - 0.5, r - 0.5), 1, 1, fill=False, edgecolor="tab:red", lw=1.5)
            )
    fig.colorbar(im, ax=ax, label="Effective hours")
    ax.set_title("Effective hours per employee and day")
    fig.tight_layout()
    path = _save_and_show(fig, "daily_hours.png", out_dir)
    plt.close(fig)
    return path
