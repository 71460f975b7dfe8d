"""Request trace id propagation."""

from contextvars import ContextVar
from typing import Optional
from uuid import uuid4

_trace_id: ContextVar[Optional[str]] = ContextVar("idgate_trace_id", default=None)


def get_trace_id() -> Optional[str]:
    return _trace_id.get()


def set_trace_id(trace_id: Optional[str] = None) -> str:
    """Set the trace id for the current context, generating one if missing."""
    value = trace_id or uuid4().hex
    _trace_id.set(value)
    return value


class TraceIdFilter:
    """Logging filter that stamps records with the current trace id."""

    def filter(self, record) -> bool:
        record.trace_id = get_trace_id() or "-"
        return True
