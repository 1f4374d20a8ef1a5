
from .generator import (
    MINUTES_PER_DAY,
    SyntheticTraceGenerator,
    TraceParams,
    generate,
    round_half_up,
    step_minutes_for,
)
from .kernels import CurvePoint, absorption_curve, event_kernel, predict_sugar_curve, summarize_curve
from .trace import DEFAULT_START, HYPER, HYPO, ExcursionEvent, MealEvent, SamplePoint, Trace

__all__ = [
    "MINUTES_PER_DAY",
    "SyntheticTraceGenerator",
    "TraceParams",
    "generate",
    "round_half_up",
    "step_minutes_for",
    "CurvePoint",
    "absorption_curve",
    "event_kernel",
    "predict_sugar_curve",
    "summarize_curve",
    "DEFAULT_START",
    "HYPO",
    "HYPER",
    "ExcursionEvent",
    "MealEvent",
    "SamplePoint",
    "Trace",
]
