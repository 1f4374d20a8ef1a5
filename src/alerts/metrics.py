from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

import numpy as np


def precision(tp: int, fp: int) -> float:
    denom = tp + fp
    return tp / denom if denom else 0.0


def recall(tp: int, fn: int) -> float:
    denom = tp + fn
    return tp / denom if denom else 0.0


def fp_reduction_pct(baseline_fp: int, improved_fp: int) -> float:
    """Percent fewer false positives than the baseline (0.0 when the baseline has none)."""
    if not baseline_fp:
        return 0.0
    return (baseline_fp - improved_fp) / baseline_fp * 100.0


def status_for(value: float, low: float, high: float) -> str:
    if value < low:
        return "LOW"
    if value > high:
        return "HIGH"
    return "IN RANGE"


def compute_range_metrics(
    glucose_trace: Iterable[float], target_low: float = 70.0, target_high: float = 180.0
) -> Dict[str, float]:
    """
    Fractions (0.0-1.0) of samples in range (tir), below low (tbr) and above
    high (tor). Bounds are inclusive for tir.
    """
    values = np.asarray(list(glucose_trace), dtype=float)
    if values.size == 0:
        return {"tir": 0.0, "tbr": 0.0, "tor": 0.0}
    tbr = float((values < target_low).mean())
    tor = float((values > target_high).mean())
    return {"tir": 1.0 - tbr - tor, "tbr": tbr, "tor": tor}


@dataclass(frozen=True)
class ExcursionStats:
    """Run lengths are in samples; multiply by the trace interval for minutes."""

    min_value: Optional[float]
    max_value: Optional[float]
    longest_low_run: int
    longest_high_run: int
    low_runs: int
    high_runs: int


def _runs(mask: np.ndarray) -> Tuple[int, int]:
    """(longest run, number of runs) of True in a boolean mask."""
    edges = np.diff(np.concatenate(([0], mask.astype(np.int8), [0])))
    lengths = np.flatnonzero(edges == -1) - np.flatnonzero(edges == 1)
    if lengths.size == 0:
        return 0, 0
    return int(lengths.max()), int(lengths.size)


def excursion_stats(
    glucose_trace: Iterable[float], target_low: float = 70.0, target_high: float = 180.0
) -> ExcursionStats:
    values = np.asarray(list(glucose_trace), dtype=float)
    longest_low, low_runs = _runs(values < target_low)
    longest_high, high_runs = _runs(values > target_high)
    return ExcursionStats(
        min_value=float(values.min()) if values.size else None,
        max_value=float(values.max()) if values.size else None,
        longest_low_run=longest_low,
        longest_high_run=longest_high,
        low_runs=low_runs,
        high_runs=high_runs,
    )


@dataclass(frozen=True)
class TraceSummary:
    total: int
    tir_pct: Optional[int]
    in_range: int
    low_count: int
    high_count: int
    mean: Optional[float]
    median: Optional[float]
    sd: Optional[float]


def summarize_trace(glucose_trace: Iterable[float], low: float, high: float) -> TraceSummary:
    """Headline numbers for a trace; sd is the population sd and needs 2+ values."""
    values = np.asarray(list(glucose_trace), dtype=float)
    total = int(values.size)
    low_count = int((values < low).sum())
    high_count = int((values > high).sum())
    in_range = total - low_count - high_count
    return TraceSummary(
        total=total,
        tir_pct=int(round(in_range / total * 100)) if total else None,
        in_range=in_range,
        low_count=low_count,
        high_count=high_count,
        mean=float(values.mean()) if total else None,
        median=float(np.median(values)) if total else None,
        sd=float(values.std()) if total >= 2 else None,
    )


__all__ = [
    "precision",
    "recall",
    "fp_reduction_pct",
    "status_for",
    "compute_range_metrics",
    "ExcursionStats",
    "excursion_stats",
    "TraceSummary",
    "summarize_trace",
]
