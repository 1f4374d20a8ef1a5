from __future__ import annotations

from pathlib import Path

import pytest

from alerts import BacktestReport, plot_backtest, run_backtest
from synth import Trace, generate

pytest.importorskip("matplotlib")


def test_plot_backtest_writes_png(tmp_path: Path) -> None:
    trace = generate(7, 500, seed=2)
    result = run_backtest(trace, 70.0, 180.0, 30.0)
    assert isinstance(result, BacktestReport)

    out = plot_backtest(
        trace,
        70.0,
        180.0,
        tmp_path / "plots" / "alerts.png",
        baseline_alerts=result.baseline.alert_indices,
        improved_alerts=result.improved.alert_indices,
        title="test",
    )
    assert out.exists()
    assert out.stat().st_size > 0


def test_plot_backtest_handles_empty_trace(tmp_path: Path) -> None:
    out = plot_backtest(Trace(()), 70.0, 180.0, tmp_path / "empty.png")
    assert out.exists()
