
from .trace_io import TraceCsvConfig, load_trace_csv, write_trace_csv

__all__ = ["TraceCsvConfig", "load_trace_csv", "write_trace_csv"]
