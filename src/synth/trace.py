from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence, Tuple

import numpy as np

# Fixed anchor so that traces generated from the same seed compare equal.
DEFAULT_START = dt.datetime(2024, 1, 1)

HYPO = "HYPO"
HYPER = "HYPER"


@dataclass(frozen=True)
class SamplePoint:
    timestamp: dt.datetime
    value: float  # mg/dL


@dataclass(frozen=True)
class MealEvent:
    onset_minute: int
    sugar_grams: float


@dataclass(frozen=True)
class ExcursionEvent:
    center_minute: int
    kind: str  # HYPO or HYPER


@dataclass(frozen=True)
class Trace:
    """
    Time-ascending sequence of glucose samples.

    `values` and `minutes` (elapsed minutes since the first sample) are numpy
    views built once, so policies can index them per step without rebuilding.
    """

    points: Tuple[SamplePoint, ...]
    _values: np.ndarray = field(init=False, repr=False, compare=False)
    _minutes: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        points = tuple(self.points)
        object.__setattr__(self, "points", points)
        values = np.array([p.value for p in points], dtype=float)
        if points:
            t0 = points[0].timestamp
            minutes = np.array(
                [(p.timestamp - t0).total_seconds() / 60.0 for p in points], dtype=float
            )
        else:
            minutes = np.zeros(0, dtype=float)
        values.setflags(write=False)
        minutes.setflags(write=False)
        object.__setattr__(self, "_values", values)
        object.__setattr__(self, "_minutes", minutes)

    @classmethod
    def from_values(
        cls,
        values: Iterable[float],
        step_minutes: float = 5.0,
        start: dt.datetime | None = None,
    ) -> "Trace":
        """Build a trace on a uniform grid starting at `start`."""
        start = start or DEFAULT_START
        return cls(
            tuple(
                SamplePoint(start + dt.timedelta(minutes=i * step_minutes), float(v))
                for i, v in enumerate(values)
            )
        )

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def minutes(self) -> np.ndarray:
        return self._minutes

    @property
    def timestamps(self) -> Sequence[dt.datetime]:
        return [p.timestamp for p in self.points]

    @property
    def step_minutes(self) -> float:
        """Sampling interval taken from the first two samples (0.0 if shorter)."""
        if len(self.points) < 2:
            return 0.0
        return float(self._minutes[1] - self._minutes[0])

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, idx: int) -> SamplePoint:
        return self.points[idx]

    def __iter__(self) -> Iterator[SamplePoint]:
        return iter(self.points)


__all__ = [
    "DEFAULT_START",
    "HYPO",
    "HYPER",
    "SamplePoint",
    "MealEvent",
    "ExcursionEvent",
    "Trace",
]
