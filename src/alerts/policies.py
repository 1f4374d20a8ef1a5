"""
Alert policies evaluated one time step at a time against a Trace.

BaselinePolicy: threshold test on the raw reading and a linear projection.
ImprovedPolicy: same test on a 3-point moving average, gated by persistence
                (risk on 2 consecutive steps) and a 60 minute cooldown after
                each firing. Hysteresis clears the active alert state but does
                not gate firing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from synth.trace import HYPER, HYPO, Trace

NONE = "NONE"


@dataclass
class AlertParams:

    """Tunables shared by both policies."""

    slope_window: int = 6  # samples, endpoints used for the slope
    smoothing_window: int = 3
    persistence_required: int = 2  # consecutive risky steps before firing
    cooldown_minutes: float = 60.0
    hypo_exit_margin: float = 5.0  # clear HYPO once projection > low + margin
    hyper_exit_margin: float = 10.0  # clear HYPER once projection < high - margin


@dataclass(frozen=True)
class AlertDecision:
    alert: bool
    kind: str = NONE


@dataclass
class PolicyState:
    active_alert: str = NONE
    persistence_count: int = 0
    cooldown_until: float | None = None  # trace minutes


def check_range(low: float, high: float) -> None:
    if not low < high:
        raise ValueError(f"Invalid target range: low ({low}) must be below high ({high}).")


def normalize_range(low: float, high: float) -> Tuple[float, float]:
    """Swap an inverted range instead of rejecting it."""
    return (low, high) if low <= high else (high, low)


def clamp_number(value: float | None, lo: float, hi: float, default: float | None = None) -> float | None:
    """Clamp a user-supplied number; None or NaN falls back to `default`."""
    if value is None or value != value:
        return default
    return min(hi, max(lo, value))


def slope_per_minute(trace: Trace, i: int, window: int = 6) -> float:
    """Endpoint slope over the trailing `window` samples; 0.0 on a non-positive interval."""
    start = max(0, i - window + 1)
    minutes = trace.minutes
    elapsed = minutes[i] - minutes[start]
    if elapsed <= 0:
        return 0.0
    values = trace.values
    return float((values[i] - values[start]) / elapsed)


def classify_risk(current: float, projected: float, low: float, high: float) -> str:
    if current < low or projected < low:
        return HYPO
    if current > high or projected > high:
        return HYPER
    return NONE


class BaselinePolicy:
    """Stateless: alerts whenever the reading or its projection leaves the range."""

    def __init__(self, params: AlertParams | None = None):
        self.params = params or AlertParams()

    def reset(self) -> None:
        return None

    def decide(self, trace: Trace, i: int, horizon_minutes: float, low: float, high: float) -> AlertDecision:
        check_range(low, high)
        value = float(trace.values[i])
        projected = value + slope_per_minute(trace, i, self.params.slope_window) * horizon_minutes
        kind = classify_risk(value, projected, low, high)
        return AlertDecision(alert=kind != NONE, kind=kind)


class ImprovedPolicy:
    """
    Smoothing + persistence + cooldown + hysteresis.
    One instance per backtest run; call reset() before reusing it.
    """

    def __init__(self, params: AlertParams | None = None):
        self.params = params or AlertParams()
        self.state = PolicyState()

    def reset(self) -> None:
        self.state = PolicyState()

    def smoothed_value(self, trace: Trace, i: int) -> float:
        start = max(0, i - self.params.smoothing_window + 1)
        return float(trace.values[start : i + 1].mean())

    def in_cooldown(self, now: float) -> bool:
        until = self.state.cooldown_until
        return until is not None and now < until

    def decide(self, trace: Trace, i: int, horizon_minutes: float, low: float, high: float) -> AlertDecision:
        check_range(low, high)
        p = self.params
        s = self.state
        now = float(trace.minutes[i])

        smoothed = self.smoothed_value(trace, i)
        smoothed_proj = smoothed + slope_per_minute(trace, i, p.slope_window) * horizon_minutes
        raw_risk = classify_risk(smoothed, smoothed_proj, low, high)

        # Any risk counts towards persistence, even when the kind switches.
        if raw_risk != NONE:
            s.persistence_count += 1
        else:
            s.persistence_count = 0

        fired = False
        if not self.in_cooldown(now) and raw_risk != NONE and s.persistence_count >= p.persistence_required:
            s.active_alert = raw_risk
            s.cooldown_until = now + p.cooldown_minutes
            fired = True

        if s.active_alert == HYPO and smoothed_proj > low + p.hypo_exit_margin:
            s.active_alert = NONE
        elif s.active_alert == HYPER and smoothed_proj < high - p.hyper_exit_margin:
            s.active_alert = NONE

        return AlertDecision(alert=fired, kind=raw_risk if fired else NONE)


__all__ = [
    "NONE",
    "AlertParams",
    "AlertDecision",
    "PolicyState",
    "BaselinePolicy",
    "ImprovedPolicy",
    "check_range",
    "normalize_range",
    "clamp_number",
    "slope_per_minute",
    "classify_risk",
]
