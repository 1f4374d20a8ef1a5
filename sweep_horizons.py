"""
What-if sweep over alert horizons.
Every horizon gets its own freshly generated trace (same seed) and its own
policies, so no state is shared between runs.

Usage:
    python sweep_horizons.py --horizons 15 30 45 60 --seed 3
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Dict, List, Optional

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent
sys.path.append(str(PROJECT_ROOT / "src"))

from alerts import BacktestFailure, normalize_range, run_backtest  # noqa: E402
from synth import generate  # noqa: E402


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sweep alert horizons for baseline vs improved policies.")
    parser.add_argument("--horizons", type=float, nargs="+", default=[15.0, 30.0, 45.0, 60.0])
    parser.add_argument("--days", type=int, default=90)
    parser.add_argument("--points", type=int, default=500)
    parser.add_argument("--seed", type=int, default=0, help="Seed shared by every run.")
    parser.add_argument("--low", type=float, default=70.0)
    parser.add_argument("--high", type=float, default=180.0)
    return parser.parse_args(argv)


def sweep(
    horizons: List[float], days: int, points: int, seed: int, low: float, high: float
) -> List[Dict[str, float]]:
    rows: List[Dict[str, float]] = []
    for horizon in horizons:
        trace = generate(days, points, seed=seed)
        result = run_backtest(trace, low, high, horizon)
        if isinstance(result, BacktestFailure):
            print(f"horizon={horizon:g}: skipped ({result.kind}: {result.message})")
            continue
        rows.append(
            {
                "horizon": horizon,
                "baseline_precision": result.baseline.precision,
                "baseline_recall": result.baseline.recall,
                "improved_precision": result.improved.precision,
                "improved_recall": result.improved.recall,
                "fp_reduction_pct": result.fp_reduction_pct,
            }
        )
    return rows


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    low, high = normalize_range(args.low, args.high)
    rows = sweep(args.horizons, args.days, args.points, args.seed, low, high)
    for r in rows:
        print(
            f"horizon={r['horizon']:g} min: "
            f"baseline P/R={r['baseline_precision']:.2f}/{r['baseline_recall']:.2f}, "
            f"improved P/R={r['improved_precision']:.2f}/{r['improved_recall']:.2f}, "
            f"FP reduction={r['fp_reduction_pct']:.1f}%"
        )
    return 0 if rows else 1


if __name__ == "__main__":
    raise SystemExit(main())
