"""Logging and runtime metrics."""

from .metrics import LookupMetrics, summarize_lookups
from .telemetry import configure_logging, generate_request_id

__all__ = [
    "LookupMetrics",
    "summarize_lookups",
    "configure_logging",
    "generate_request_id",
]
