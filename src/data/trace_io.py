from __future__ import annotations

import csv
import datetime as dt
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from synth.trace import SamplePoint, Trace


@dataclass
class TraceCsvConfig:
    """Column layout for CGM trace CSV files."""

    time_col: str = "timestamp"
    glucose_col: str = "glucose_mg_dl"
    time_format: Optional[str] = None  # e.g., "%Y-%m-%d %H:%M:%S"; ISO 8601 when None


def _parse_time(raw: str, cfg: TraceCsvConfig) -> Optional[dt.datetime]:
    if not raw:
        return None
    try:
        if cfg.time_format:
            return dt.datetime.strptime(raw, cfg.time_format)
        return dt.datetime.fromisoformat(raw)
    except ValueError:
        return None


def load_trace_csv(path: str | Path, cfg: Optional[TraceCsvConfig] = None) -> Trace:
    """
    Load a CGM CSV into a Trace.
    Rows with a missing/invalid timestamp or glucose value are skipped. Rows are
    sorted by time and a repeated timestamp keeps the last reading, so the
    resulting trace is strictly increasing in time.
    """
    cfg = cfg or TraceCsvConfig()
    path = Path(path)
    by_time: Dict[dt.datetime, float] = {}

    with path.open(newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                glucose = float(row.get(cfg.glucose_col, "") or "nan")
            except ValueError:
                continue
            if math.isnan(glucose):
                continue
            timestamp = _parse_time(row.get(cfg.time_col, "") or "", cfg)
            if timestamp is None:
                continue
            by_time[timestamp] = glucose

    points: List[SamplePoint] = [SamplePoint(ts, by_time[ts]) for ts in sorted(by_time)]
    return Trace(tuple(points))


def write_trace_csv(trace: Trace, path: str | Path, cfg: Optional[TraceCsvConfig] = None) -> Path:
    """
    Write a trace with one row per sample (ISO timestamps unless time_format is
    set). Values are written with repr() so loading the file gives back the
    same floats.
    """
    cfg = cfg or TraceCsvConfig()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([cfg.time_col, cfg.glucose_col])
        for p in trace:
            ts = p.timestamp.strftime(cfg.time_format) if cfg.time_format else p.timestamp.isoformat()
            writer.writerow([ts, repr(float(p.value))])
    return path


__all__ = ["TraceCsvConfig", "load_trace_csv", "write_trace_csv"]
