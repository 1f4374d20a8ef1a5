"""
Backtest of the baseline and improved alert policies on one trace.

At every evaluated index the samples inside the look-ahead horizon decide the
ground truth (any value below low or above high), and each policy's decision
is scored as TP / FP / FN. True negatives are not tracked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from synth.generator import round_half_up
from synth.trace import Trace

from .metrics import fp_reduction_pct, precision, recall
from .policies import AlertParams, BaselinePolicy, ImprovedPolicy

MIN_SAMPLES = 20
LEAD_IN = 10  # samples reserved for slope estimation

INSUFFICIENT_DATA = "insufficient_data"
INVALID_RANGE = "invalid_range"
INVALID_HORIZON = "invalid_horizon"


@dataclass
class ConfusionCounts:
    true_positive: int = 0
    false_positive: int = 0
    false_negative: int = 0

    def record(self, alert: bool, true_event: bool) -> None:
        if alert and true_event:
            self.true_positive += 1
        elif alert:
            self.false_positive += 1
        elif true_event:
            self.false_negative += 1


@dataclass(frozen=True)
class PolicyScore:
    true_positive: int
    false_positive: int
    false_negative: int
    precision: float
    recall: float
    alert_indices: Tuple[int, ...] = ()

    @classmethod
    def from_counts(cls, counts: ConfusionCounts, alert_indices: List[int]) -> "PolicyScore":
        return cls(
            true_positive=counts.true_positive,
            false_positive=counts.false_positive,
            false_negative=counts.false_negative,
            precision=precision(counts.true_positive, counts.false_positive),
            recall=recall(counts.true_positive, counts.false_negative),
            alert_indices=tuple(alert_indices),
        )


@dataclass(frozen=True)
class BacktestReport:
    baseline: PolicyScore
    improved: PolicyScore
    fp_reduction_pct: float
    low: float
    high: float
    horizon_minutes: float
    horizon_steps: int
    evaluated_steps: int
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class BacktestFailure:
    """Tagged result for a backtest that could not produce a meaningful signal."""

    kind: str
    message: str
    sample_count: int = 0
    ok: bool = field(default=False, init=False)


BacktestResult = Union[BacktestReport, BacktestFailure]


def horizon_steps_for(step_minutes: float, horizon_minutes: float) -> int:
    """Samples covered by the horizon; a degenerate interval falls back to one step."""
    if step_minutes <= 0:
        return 1
    return max(1, round_half_up(horizon_minutes / step_minutes))


class BacktestEvaluator:
    """
    Drives both policies across a trace. Policies and counts are rebuilt on
    every run() so that runs never share state.
    """

    def __init__(self, params: AlertParams | None = None):
        self.params = params or AlertParams()

    def run(self, trace: Trace, low: float, high: float, horizon_minutes: float) -> BacktestResult:
        n = len(trace)
        if not low < high:
            return BacktestFailure(INVALID_RANGE, f"low ({low}) must be below high ({high})", n)
        if horizon_minutes <= 0:
            return BacktestFailure(INVALID_HORIZON, f"horizon must be positive, got {horizon_minutes}", n)
        if n < MIN_SAMPLES:
            return BacktestFailure(INSUFFICIENT_DATA, f"need at least {MIN_SAMPLES} samples, got {n}", n)

        horizon_steps = horizon_steps_for(trace.step_minutes, horizon_minutes)
        if n - horizon_steps <= LEAD_IN:
            return BacktestFailure(
                INSUFFICIENT_DATA,
                f"{n} samples leave nothing to score with a {horizon_steps}-step horizon",
                n,
            )

        baseline = BaselinePolicy(self.params)
        improved = ImprovedPolicy(self.params)
        improved.reset()
        base_counts = ConfusionCounts()
        imp_counts = ConfusionCounts()
        base_alerts: List[int] = []
        imp_alerts: List[int] = []

        values = trace.values
        evaluated = 0
        for i in range(LEAD_IN, n - horizon_steps):
            future = values[i + 1 : i + 1 + horizon_steps]
            true_event = bool((future < low).any() or (future > high).any())

            base = baseline.decide(trace, i, horizon_minutes, low, high)
            imp = improved.decide(trace, i, horizon_minutes, low, high)

            base_counts.record(base.alert, true_event)
            imp_counts.record(imp.alert, true_event)
            if base.alert:
                base_alerts.append(i)
            if imp.alert:
                imp_alerts.append(i)
            evaluated += 1

        return BacktestReport(
            baseline=PolicyScore.from_counts(base_counts, base_alerts),
            improved=PolicyScore.from_counts(imp_counts, imp_alerts),
            fp_reduction_pct=fp_reduction_pct(base_counts.false_positive, imp_counts.false_positive),
            low=low,
            high=high,
            horizon_minutes=horizon_minutes,
            horizon_steps=horizon_steps,
            evaluated_steps=evaluated,
        )


def run_backtest(
    trace: Trace,
    low: float,
    high: float,
    horizon_minutes: float,
    params: AlertParams | None = None,
) -> BacktestResult:
    return BacktestEvaluator(params).run(trace, low, high, horizon_minutes)


__all__ = [
    "MIN_SAMPLES",
    "LEAD_IN",
    "INSUFFICIENT_DATA",
    "INVALID_RANGE",
    "INVALID_HORIZON",
    "ConfusionCounts",
    "PolicyScore",
    "BacktestReport",
    "BacktestFailure",
    "BacktestResult",
    "BacktestEvaluator",
    "horizon_steps_for",
    "run_backtest",
]
