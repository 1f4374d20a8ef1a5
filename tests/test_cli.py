"""Tests for the root command-line scripts."""

from __future__ import annotations

from pathlib import Path

import pytest

import predict_meal
import run_backtest
import sweep_horizons
from synth import Trace


def test_parse_args_custom_values() -> None:
    ns = run_backtest.parse_args(["--days", "10", "--horizon", "45", "--seed", "3"])
    assert ns.days == 10
    assert ns.horizon == 45.0
    assert ns.seed == 3
    assert ns.csv is None


def test_backtest_main_prints_report(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    trace_path = tmp_path / "trace.csv"
    code = run_backtest.main(
        ["--days", "7", "--points", "300", "--seed", "1", "--save-trace", str(trace_path)]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "BASELINE:" in out
    assert "IMPROVED (smoothing+persistence+cooldown+hysteresis):" in out
    assert "False-positive reduction vs baseline" in out
    assert trace_path.exists()


def test_backtest_main_swaps_inverted_range(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_backtest.main(["--days", "7", "--seed", "1", "--low", "180", "--high", "70"])
    assert code == 0
    assert "low=70, high=180" in capsys.readouterr().out


def test_backtest_main_reports_short_csv(capsys: pytest.CaptureFixture[str], tmp_path: Path) -> None:
    path = tmp_path / "short.csv"
    path.write_text("timestamp,glucose_mg_dl\n2025-01-01T08:00:00,100\n2025-01-01T08:05:00,110\n")
    code = run_backtest.main(["--csv", str(path)])
    assert code == 1
    assert "insufficient_data" in capsys.readouterr().out


def test_backtest_main_skips_plot_without_matplotlib(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    def _plot(*_: object, **__: object) -> None:
        raise ImportError("no matplotlib")

    monkeypatch.setattr(run_backtest, "plot_backtest", _plot)
    code = run_backtest.main(["--days", "7", "--seed", "2", "--plot-path", str(tmp_path / "p.png")])
    assert code == 0
    assert "skipping plot" in capsys.readouterr().out


def test_sweep_builds_one_row_per_horizon(capsys: pytest.CaptureFixture[str]) -> None:
    code = sweep_horizons.main(["--horizons", "15", "30", "--days", "7", "--points", "300", "--seed", "4"])
    assert code == 0
    out = capsys.readouterr().out
    assert "horizon=15 min" in out
    assert "horizon=30 min" in out


def test_sweep_rows_are_independent_of_order() -> None:
    forward = sweep_horizons.sweep([15.0, 45.0], 7, 300, 4, 70.0, 180.0)
    backward = sweep_horizons.sweep([45.0, 15.0], 7, 300, 4, 70.0, 180.0)
    assert forward == list(reversed(backward))


def test_predict_meal_prints_peak(capsys: pytest.CaptureFixture[str]) -> None:
    code = predict_meal.main(["--current", "110", "--sugar", "40", "--horizon", "120"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Peak ~" in out
    assert "at 120 min" in out


def test_backtest_main_prints_excursion_runs(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_backtest.main(["--days", "7", "--points", "300", "--seed", "1"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Excursions: TBR=" in out
    assert "longest low run" in out
    assert "longest high run" in out


def test_format_excursions_uses_trace_interval() -> None:
    trace = Trace.from_values([100, 60, 65, 100, 200, 210, 220, 100, 50], step_minutes=5.0)
    line = run_backtest.format_excursions(trace, 70.0, 180.0)
    assert line == (
        "Excursions: TBR=33.3% TOR=33.3% | "
        "longest low run 10 min (2 runs), longest high run 15 min (1 runs)"
    )


def test_predict_meal_swaps_inverted_range(capsys: pytest.CaptureFixture[str]) -> None:
    code = predict_meal.main(["--current", "110", "--sugar", "0", "--horizon", "20", "--low", "180", "--high", "70"])
    assert code == 0
    rows = capsys.readouterr().out.splitlines()[:-1]
    assert len(rows) == 3
    assert all(row.endswith("IN RANGE") for row in rows)
