"""
Response shapes used to build synthetic glucose traces.

absorption_curve: meal response, zero at onset, peaks at peak_minute, then decays.
event_kernel:     gaussian bump centred on an excursion event (hypo or hyper).

Both accept scalars or numpy arrays for the elapsed time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


def absorption_curve(peak_rise, elapsed_minutes, peak_minute: float):
    """
    Gamma-like meal response: peak_rise * x * exp(1 - x) with x = t / peak_minute.
    Returns exactly peak_rise at t == peak_minute. Callers skip negative t.
    """
    x = np.asarray(elapsed_minutes, dtype=float) / max(1.0, float(peak_minute))
    out = peak_rise * x * np.exp(1.0 - x)
    return float(out) if np.ndim(out) == 0 else out


def event_kernel(amplitude, elapsed_minutes, sigma: float):
    """Symmetric gaussian bump; elapsed is negative before the centre."""
    dt = np.asarray(elapsed_minutes, dtype=float)
    out = amplitude * np.exp(-(dt * dt) / (2.0 * sigma * sigma))
    return float(out) if np.ndim(out) == 0 else out


@dataclass(frozen=True)
class CurvePoint:
    minute: int
    value: float


def predict_sugar_curve(
    current_glucose: float,
    sugar_grams: float,
    mgdl_per_gram: float = 1.6,
    peak_minute: float = 45.0,
    horizon_minutes: int = 180,
    activity_factor: float = 1.0,
    step_minutes: int = 10,
) -> List[CurvePoint]:
    """
    Educational estimate of glucose after eating `sugar_grams`.
    Points every `step_minutes` from 0 to `horizon_minutes` inclusive.
    """
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive.")
    peak_rise = sugar_grams * mgdl_per_gram * activity_factor
    return [
        CurvePoint(minute=t, value=current_glucose + absorption_curve(peak_rise, t, peak_minute))
        for t in range(0, int(horizon_minutes) + 1, step_minutes)
    ]


def summarize_curve(curve: List[CurvePoint]) -> Tuple[CurvePoint, CurvePoint]:
    """Return (peak, end) points of a prediction curve."""
    if not curve:
        raise ValueError("Empty prediction curve.")
    peak = max(curve, key=lambda p: p.value)
    return peak, curve[-1]


__all__ = [
    "CurvePoint",
    "absorption_curve",
    "event_kernel",
    "predict_sugar_curve",
    "summarize_curve",
]
