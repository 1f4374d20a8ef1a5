
from .backtest import (
    BacktestEvaluator,
    BacktestFailure,
    BacktestReport,
    ConfusionCounts,
    PolicyScore,
    run_backtest,
)
from .metrics import (
    ExcursionStats,
    compute_range_metrics,
    excursion_stats,
    fp_reduction_pct,
    precision,
    recall,
    status_for,
    summarize_trace,
)
from .plotting import plot_backtest
from .policies import (
    AlertDecision,
    AlertParams,
    BaselinePolicy,
    ImprovedPolicy,
    PolicyState,
    clamp_number,
    normalize_range,
)

__all__ = [
    "BacktestEvaluator",
    "BacktestFailure",
    "BacktestReport",
    "ConfusionCounts",
    "PolicyScore",
    "run_backtest",
    "ExcursionStats",
    "compute_range_metrics",
    "excursion_stats",
    "fp_reduction_pct",
    "precision",
    "recall",
    "status_for",
    "summarize_trace",
    "plot_backtest",
    "AlertDecision",
    "AlertParams",
    "BaselinePolicy",
    "ImprovedPolicy",
    "PolicyState",
    "clamp_number",
    "normalize_range",
]
