from __future__ import annotations

import datetime as dt

import numpy as np
import pytest

from alerts.backtest import (
    INSUFFICIENT_DATA,
    INVALID_HORIZON,
    INVALID_RANGE,
    BacktestEvaluator,
    BacktestFailure,
    BacktestReport,
    ConfusionCounts,
    horizon_steps_for,
    run_backtest,
)
from alerts.metrics import fp_reduction_pct, precision, recall
from synth import SamplePoint, Trace, generate

LOW, HIGH, HORIZON = 70.0, 180.0, 30.0


def _dip_values() -> np.ndarray:
    values = np.full(200, 150.0)
    values[100:111] = 60.0
    return values


def test_confusion_counts_record_each_case_once() -> None:
    counts = ConfusionCounts()
    counts.record(alert=True, true_event=True)
    counts.record(alert=True, true_event=False)
    counts.record(alert=False, true_event=True)
    counts.record(alert=False, true_event=False)
    assert (counts.true_positive, counts.false_positive, counts.false_negative) == (1, 1, 1)


def test_metric_helpers_zero_denominators() -> None:
    assert precision(0, 0) == 0.0
    assert recall(0, 0) == 0.0
    assert fp_reduction_pct(0, 3) == 0.0
    assert fp_reduction_pct(10, 4) == pytest.approx(60.0)


def test_horizon_steps_for() -> None:
    assert horizon_steps_for(5.0, 30.0) == 6
    assert horizon_steps_for(20.0, 5.0) == 1
    assert horizon_steps_for(0.0, 30.0) == 1


def test_too_short_trace_is_insufficient_data() -> None:
    result = run_backtest(Trace.from_values([150.0] * 19), LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestFailure)
    assert result.kind == INSUFFICIENT_DATA
    assert result.sample_count == 19
    assert result.ok is False


def test_horizon_eating_the_trace_is_insufficient_data() -> None:
    # 60 min at 5 min steps leaves 20 - 12 = 8 samples, below the lead-in
    result = run_backtest(Trace.from_values([150.0] * 20), LOW, HIGH, 60.0)
    assert isinstance(result, BacktestFailure)
    assert result.kind == INSUFFICIENT_DATA


def test_inverted_range_and_bad_horizon_are_tagged() -> None:
    trace = Trace.from_values([150.0] * 50)
    bad_range = run_backtest(trace, HIGH, LOW, HORIZON)
    bad_horizon = run_backtest(trace, LOW, HIGH, 0.0)
    assert isinstance(bad_range, BacktestFailure) and bad_range.kind == INVALID_RANGE
    assert isinstance(bad_horizon, BacktestFailure) and bad_horizon.kind == INVALID_HORIZON


def test_dip_scenario_both_policies_catch_hypo() -> None:
    result = run_backtest(Trace.from_values(_dip_values(), step_minutes=5), LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestReport)
    assert result.ok is True
    assert result.horizon_steps == 6
    assert result.baseline.true_positive >= 1
    assert result.improved.true_positive >= 1
    # the rebound after the dip projects high for both; cooldown limits the improved policy
    assert 101 in result.improved.alert_indices
    assert result.improved.false_positive <= result.baseline.false_positive


def test_noisy_dip_improved_has_no_more_false_positives() -> None:
    rng = np.random.default_rng(2024)
    values = _dip_values() + rng.normal(0.0, 8.0, 200)
    result = run_backtest(Trace.from_values(values, step_minutes=5), LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestReport)
    assert result.improved.false_positive <= result.baseline.false_positive


def test_every_evaluated_index_counted_at_most_once() -> None:
    trace = generate(30, 2000, seed=8)
    result = run_backtest(trace, LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestReport)
    assert result.evaluated_steps == len(trace) - result.horizon_steps - 10
    for score in (result.baseline, result.improved):
        assert score.true_positive + score.false_positive == len(score.alert_indices)
        assert score.true_positive + score.false_positive + score.false_negative <= result.evaluated_steps
        assert all(10 <= i < len(trace) - result.horizon_steps for i in score.alert_indices)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_precision_and_recall_are_bounded(seed: int) -> None:
    result = run_backtest(generate(14, 800, seed=seed), LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestReport)
    for score in (result.baseline, result.improved):
        assert 0.0 <= score.precision <= 1.0
        assert 0.0 <= score.recall <= 1.0


def test_improved_alerts_respect_cooldown_on_generated_trace() -> None:
    trace = generate(30, 3000, seed=21)
    result = run_backtest(trace, LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestReport)
    minutes = [trace.minutes[i] for i in result.improved.alert_indices]
    assert all(b - a >= 60.0 for a, b in zip(minutes, minutes[1:]))


def test_runs_do_not_share_state() -> None:
    trace = generate(14, 800, seed=5)
    evaluator = BacktestEvaluator()
    first = evaluator.run(trace, LOW, HIGH, HORIZON)
    second = evaluator.run(trace, LOW, HIGH, HORIZON)
    assert first == second


def test_degenerate_interval_runs_as_flat_projection() -> None:
    t = dt.datetime(2024, 1, 1)
    trace = Trace(tuple(SamplePoint(t, 150.0) for _ in range(30)))
    result = run_backtest(trace, LOW, HIGH, HORIZON)
    assert isinstance(result, BacktestReport)
    assert result.horizon_steps == 1
    assert result.baseline.false_positive == 0
    assert result.improved.false_positive == 0
