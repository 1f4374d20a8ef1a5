"""
Synthetic CGM trace generator.

glucose(t) = baseline + daily rhythm + meal responses + excursion events + noise

Meals only act after their onset. Excursion events are gaussian bumps and act
on both sides of their centre, since they model gradual episodes rather than
an onset-triggered response. All randomness comes from one numpy Generator,
so a fixed seed reproduces the trace exactly.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .kernels import absorption_curve, event_kernel
from .trace import DEFAULT_START, HYPER, HYPO, ExcursionEvent, MealEvent, SamplePoint, Trace

MINUTES_PER_DAY = 24 * 60


@dataclass
class TraceParams:

    """Configurable constants for the synthetic trace."""

    baseline_glucose: float = 115.0
    daily_amplitude: float = 12.0
    daily_phase: float = 0.8  # radians subtracted from the daily sine
    noise_std: float = 8.0

    min_glucose: float = 40.0
    max_glucose: float = 400.0
    min_step_minutes: int = 5

    # (minute of day, jitter span in minutes); jitter is uniform in +-span/2
    meal_anchors: Tuple[Tuple[int, float], ...] = (
        (8 * 60, 45.0),   # Breakfast
        (13 * 60, 60.0),  # Lunch
        (19 * 60, 60.0),  # Dinner
    )
    meal_sugar_range: Tuple[float, float] = (20.0, 80.0)  # grams
    mgdl_per_gram: float = 1.4
    meal_peak_minute: float = 45.0

    # Hypo events are narrower and shallower, hyper broader and stronger
    hypo_amplitude: float = -35.0
    hypo_sigma: float = 35.0
    hyper_amplitude: float = 55.0
    hyper_sigma: float = 50.0
    days_per_hypo: float = 18.0
    days_per_hyper: float = 12.0


def round_half_up(x: float) -> int:
    """floor(x + 0.5): halves round up, so 2.5 -> 3 and -2.5 -> -2."""
    return int(math.floor(x + 0.5))


def step_minutes_for(total_days: int, approx_point_count: int, min_step: int = 5) -> int:
    """Sampling interval giving roughly `approx_point_count` samples."""
    return max(min_step, round_half_up(total_days * MINUTES_PER_DAY / approx_point_count))


class SyntheticTraceGenerator:
    """
    Generates one ground-truth trace per call to generate().
    The schedules used for the last trace are kept on `meals` and `excursions`.
    """

    def __init__(
        self,
        params: TraceParams | None = None,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.params = params or TraceParams()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.meals: List[MealEvent] = []
        self.excursions: List[ExcursionEvent] = []

    def _meal_schedule(self, total_days: int) -> List[MealEvent]:
        """Three jittered meals per day, sugar drawn uniformly in the configured range."""
        p = self.params
        onsets: List[int] = []
        for day in range(total_days):
            day_start = day * MINUTES_PER_DAY
            for anchor, span in p.meal_anchors:
                onsets.append(day_start + anchor + round_half_up((self.rng.random() - 0.5) * span))
        lo, hi = p.meal_sugar_range
        return [MealEvent(onset, lo + round_half_up(self.rng.random() * (hi - lo))) for onset in onsets]

    def _excursion_schedule(self, total_days: int, total_minutes: int) -> List[ExcursionEvent]:
        p = self.params
        num_hypo = max(1, round_half_up(total_days / p.days_per_hypo))
        num_hyper = max(1, round_half_up(total_days / p.days_per_hyper))
        events = [
            ExcursionEvent(round_half_up(self.rng.random() * total_minutes), HYPO) for _ in range(num_hypo)
        ]
        events += [
            ExcursionEvent(round_half_up(self.rng.random() * total_minutes), HYPER) for _ in range(num_hyper)
        ]
        return events

    def _gaussian_noise(self, n: int) -> np.ndarray:
        """Box-Muller from two independent uniform draws per sample."""
        u = np.maximum(1e-9, self.rng.random(n))
        v = np.maximum(1e-9, self.rng.random(n))
        return np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * math.pi * v)

    def meal_delta(self, minutes: np.ndarray) -> np.ndarray:
        p = self.params
        total = np.zeros_like(minutes, dtype=float)
        for meal in self.meals:
            started = minutes >= meal.onset_minute
            if not started.any():
                continue
            elapsed = minutes[started] - meal.onset_minute
            total[started] += absorption_curve(meal.sugar_grams * p.mgdl_per_gram, elapsed, p.meal_peak_minute)
        return total

    def event_delta(self, minutes: np.ndarray) -> np.ndarray:
        p = self.params
        total = np.zeros_like(minutes, dtype=float)
        for ev in self.excursions:
            if ev.kind == HYPO:
                total += event_kernel(p.hypo_amplitude, minutes - ev.center_minute, p.hypo_sigma)
            else:
                total += event_kernel(p.hyper_amplitude, minutes - ev.center_minute, p.hyper_sigma)
        return total

    def generate(
        self,
        total_days: int,
        approx_point_count: int,
        start: dt.datetime | None = None,
    ) -> Trace:
        if total_days < 1:
            raise ValueError("total_days must be at least 1.")
        if approx_point_count < 1:
            raise ValueError("approx_point_count must be at least 1.")
        p = self.params
        start = start or DEFAULT_START
        total_minutes = total_days * MINUTES_PER_DAY
        step = step_minutes_for(total_days, approx_point_count, p.min_step_minutes)

        self.meals = self._meal_schedule(total_days)
        self.excursions = self._excursion_schedule(total_days, total_minutes)

        minutes = np.arange(0, total_minutes + 1, step, dtype=float)
        day_phase = (minutes % MINUTES_PER_DAY) / MINUTES_PER_DAY * 2.0 * math.pi
        daily = p.daily_amplitude * np.sin(day_phase - p.daily_phase)
        noise = p.noise_std * self._gaussian_noise(minutes.shape[0])

        glucose = p.baseline_glucose + daily + self.meal_delta(minutes) + self.event_delta(minutes) + noise
        glucose = np.clip(glucose, p.min_glucose, p.max_glucose)

        return Trace(
            tuple(
                SamplePoint(start + dt.timedelta(minutes=float(m)), float(g))
                for m, g in zip(minutes, glucose)
            )
        )


def generate(
    total_days: int,
    approx_point_count: int,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
    params: TraceParams | None = None,
    start: dt.datetime | None = None,
) -> Trace:
    """One-shot helper around SyntheticTraceGenerator."""
    return SyntheticTraceGenerator(params, seed=seed, rng=rng).generate(total_days, approx_point_count, start=start)


__all__ = ["TraceParams", "SyntheticTraceGenerator", "generate", "round_half_up", "step_minutes_for", "MINUTES_PER_DAY"]
