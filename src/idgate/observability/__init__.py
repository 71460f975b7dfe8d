"""Observability helpers for IdGate."""

from idgate.observability.metrics import MetricsRegistry, metrics
from idgate.observability.trace import TraceIdFilter, get_trace_id, set_trace_id

__all__ = ["MetricsRegistry", "TraceIdFilter", "metrics", "get_trace_id", "set_trace_id"]
