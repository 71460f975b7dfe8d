"""In-process metrics for the lease table."""

from bisect import bisect_left
from dataclasses import dataclass, field
from threading import Lock
from typing import Any

LEASES_GRANTED = "leases.granted"
LEASES_RENEWED = "leases.renewed"
LEASES_RENEW_FALLBACK = "leases.renew_fallback"
LEASES_RECLAIMED = "leases.reclaimed"
LEASES_EXHAUSTED = "leases.exhausted"
LEASES_NOT_FOUND = "leases.not_found"
LEASES_ACTIVE = "leases.active"
TABLE_OP_LATENCY_MS = "table.op_latency_ms"

# Upper bounds (ms) for table operation latency buckets
LATENCY_BUCKETS_MS = (0.1, 0.5, 1.0, 5.0, 25.0, 100.0)


@dataclass
class Histogram:
    """Fixed-bucket histogram; values above the last bound land in ``le_inf``."""

    bounds: tuple[float, ...] = LATENCY_BUCKETS_MS
    counts: list[int] = field(default_factory=list)
    total: float = 0.0
    peak: float = 0.0

    def __post_init__(self) -> None:
        if not self.counts:
            self.counts = [0] * (len(self.bounds) + 1)

    def observe(self, value: float) -> None:
        self.counts[bisect_left(self.bounds, value)] += 1
        self.total += value
        self.peak = max(self.peak, value)

    def snapshot(self) -> dict[str, Any]:
        count = sum(self.counts)
        labels = [f"le_{bound:g}" for bound in self.bounds] + ["le_inf"]
        return {
            "count": count,
            "avg": self.total / count if count else 0.0,
            "max": self.peak,
            "buckets": dict(zip(labels, self.counts)),
        }


class MetricsRegistry:
    """Thread-safe counters, gauges and latency histograms."""

    def __init__(self) -> None:
        self._lock = Lock()
        self.counters: dict[str, int] = {}
        self.gauges: dict[str, float] = {}
        self.histograms: dict[str, Histogram] = {}

    def inc_counter(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self.counters[name] = self.counters.get(name, 0) + amount

    def set_gauge(self, name: str, value: float) -> None:
        with self._lock:
            self.gauges[name] = value

    def observe(self, name: str, value: float) -> None:
        with self._lock:
            self.histograms.setdefault(name, Histogram()).observe(value)

    def counter(self, name: str) -> int:
        """Current value of a counter, 0 if never incremented."""
        with self._lock:
            return self.counters.get(name, 0)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self.counters),
                "gauges": dict(self.gauges),
                "histograms": {name: hist.snapshot() for name, hist in self.histograms.items()},
            }


metrics = MetricsRegistry()
