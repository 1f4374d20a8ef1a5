from __future__ import annotations

import pathlib
from typing import Sequence

from synth.trace import Trace


def plot_backtest(
    trace: Trace,
    target_low: float,
    target_high: float,
    output_path: str | pathlib.Path,
    baseline_alerts: Sequence[int] = (),
    improved_alerts: Sequence[int] = (),
    title: str | None = None,
) -> pathlib.Path:
    """
    Save a plot of a glucose trace with target range shading.
    Alert indices from a backtest are drawn as markers on the trace, the baseline
    slightly above the line and the improved policy slightly below, so overlapping
    alerts stay visible.
    """
    import matplotlib

    matplotlib.use("Agg")  # headless backend
    import matplotlib.pyplot as plt  # type: ignore  # lazy import
    import numpy as np

    output_path = pathlib.Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    plt.figure(figsize=(12, 5))
    plt.style.use("seaborn-v0_8-muted")
    plt.grid(True, linestyle="--", alpha=0.3)

    hours = trace.minutes / 60.0
    values = trace.values
    if len(trace):
        plt.plot(hours, values, color="C0", linewidth=0.8, label="Glucose")
    else:
        plt.title("No samples provided")

    def mark(indices: Sequence[int], offset: float, label: str, color: str, marker: str) -> None:
        idx = np.asarray(list(indices), dtype=int)
        if idx.size == 0:
            return
        plt.scatter(hours[idx], values[idx] + offset, s=12, color=color, marker=marker, label=label)

    mark(baseline_alerts, 8.0, f"Baseline alerts ({len(baseline_alerts)})", "C3", "v")
    mark(improved_alerts, -8.0, f"Improved alerts ({len(improved_alerts)})", "C2", "^")

    plt.axhspan(target_low, target_high, color="green", alpha=0.1, label="Target range")
    if title and len(trace):
        plt.title(title)
    plt.xlabel("Hours")
    plt.ylabel("Glucose (mg/dL)")
    plt.legend(loc="upper right", fontsize="small")
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()
    return output_path


__all__ = ["plot_backtest"]
