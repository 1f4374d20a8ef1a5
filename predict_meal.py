"""
Educational estimate of the glucose response to a sugary meal.

Usage:
    python predict_meal.py --current 110 --sugar 40 --horizon 180
"""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import List, Optional

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent
sys.path.append(str(PROJECT_ROOT / "src"))

from alerts import clamp_number, normalize_range, status_for  # noqa: E402
from synth import predict_sugar_curve, summarize_curve  # noqa: E402


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Predict a meal glucose curve (not medical advice).")
    parser.add_argument("--current", type=float, required=True, help="Current glucose (mg/dL).")
    parser.add_argument("--sugar", type=float, required=True, help="Sugar eaten (grams).")
    parser.add_argument("--mgdl-per-gram", type=float, default=1.6, help="Rise per gram of sugar.")
    parser.add_argument("--peak", type=float, default=45.0, help="Minutes to peak absorption.")
    parser.add_argument("--horizon", type=int, default=180, help="Minutes to predict.")
    parser.add_argument("--activity-factor", type=float, default=1.0, help="Scale for activity (<1 dampens).")
    parser.add_argument("--low", type=float, default=70.0)
    parser.add_argument("--high", type=float, default=180.0)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    current = clamp_number(args.current, 40, 600)
    grams = clamp_number(args.sugar, 0, 300)
    mgdl_per_gram = clamp_number(args.mgdl_per_gram, 0, 10, default=1.6)
    peak = clamp_number(args.peak, 15, 180, default=45.0)
    activity = args.activity_factor or 1.0
    low, high = normalize_range(args.low, args.high)

    curve = predict_sugar_curve(current, grams, mgdl_per_gram, peak, args.horizon, activity)
    for point in curve:
        print(f"{point.minute:4d} min  {point.value:6.1f} mg/dL  {status_for(point.value, low, high)}")
    peak_pt, end_pt = summarize_curve(curve)
    print(
        f"Peak ~ {peak_pt.value:.0f} mg/dL at ~{peak_pt.minute} min | "
        f"End ~ {end_pt.value:.0f} mg/dL at {args.horizon} min (educational estimate)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
