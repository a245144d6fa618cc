from __future__ import annotations

import logging
import math
import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Iterator

from fastapi import Request

logger = logging.getLogger(__name__)

POSTGRES_SEARCH = "postgres-search"


@dataclass
class Sample:
    operation: str
    duration_ms: float
    timestamp: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


def _aggregate(durations: list[float]) -> dict[str, float | int]:
    if not durations:
        return {"avg_ms": 0.0, "min_ms": 0.0, "max_ms": 0.0, "median_ms": 0.0, "p95_ms": 0.0, "count": 0}

    ds = sorted(durations)
    n = len(ds)
    if n % 2 == 0:
        median = (ds[n // 2 - 1] + ds[n // 2]) / 2
    else:
        median = ds[n // 2]

    return {
        "avg_ms": sum(ds) / n,
        "min_ms": ds[0],
        "max_ms": ds[-1],
        "median_ms": median,
        "p95_ms": ds[math.ceil(n * 0.95) - 1],
        "count": n,
    }


class MetricsRecorder:
    """
    In-process latency store for search operations.

    One instance is built at startup and kept on app.state; handlers get it
    through the get_metrics dependency.
    """

    def __init__(self, max_samples: int = 10000, slow_p95_ms: float = 200.0):
        self._samples: deque[Sample] = deque(maxlen=max_samples)
        self._lock = threading.Lock()
        self.slow_p95_ms = slow_p95_ms

    def record(self, operation: str, duration_ms: float, **metadata: Any) -> Sample:
        sample = Sample(operation, duration_ms, datetime.utcnow(), metadata)
        with self._lock:
            self._samples.append(sample)
        logger.info("[PERF] %s: %.2fms %s", operation, duration_ms, metadata or "")
        return sample

    @contextmanager
    def measure(self, operation: str, **metadata: Any) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error("[PERF] %s FAILED after %.2fms", operation, elapsed)
            raise
        self.record(operation, (time.perf_counter() - start) * 1000, **metadata)

    def history(self, operation: str | None = None) -> list[Sample]:
        with self._lock:
            samples = list(self._samples)
        if operation:
            return [s for s in samples if s.operation == operation]
        return samples

    def aggregate(self, operation: str) -> dict[str, float | int]:
        return _aggregate([s.duration_ms for s in self.history(operation)])

    def recent_summary(self, minutes: int = 5) -> dict[str, dict[str, float | int]]:
        cutoff = datetime.utcnow() - timedelta(minutes=minutes)
        grouped: dict[str, list[float]] = {}
        for s in self.history():
            if s.timestamp >= cutoff:
                grouped.setdefault(s.operation, []).append(s.duration_ms)
        return {op: _aggregate(ds) for op, ds in grouped.items()}

    def benchmark_report(self, operation: str = POSTGRES_SEARCH) -> dict[str, Any]:
        m = self.aggregate(operation)
        recommendations: list[str] = []

        if m["count"] == 0:
            summary = f"No samples recorded for {operation}."
        else:
            summary = (
                f"{operation}:\n"
                f"  Average: {m['avg_ms']:.2f}ms\n"
                f"  Min/Max: {m['min_ms']:.2f}ms / {m['max_ms']:.2f}ms\n"
                f"  P95: {m['p95_ms']:.2f}ms\n"
                f"  Samples: {m['count']}\n"
            )
            if m["p95_ms"] > self.slow_p95_ms:
                recommendations.append(
                    f"{operation} P95 latency is high ({m['p95_ms']:.0f}ms). Consider adding database indexes."
                )

        return {
            "operation": operation,
            "metrics": m,
            "summary": summary,
            "recommendations": recommendations,
        }

    def clear(self) -> None:
        with self._lock:
            self._samples.clear()


def get_metrics(request: Request) -> MetricsRecorder:
    return request.app.state.metrics
