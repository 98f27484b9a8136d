"""Per-route latency samples for the relay endpoints."""

import threading
import time
from collections import deque
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable

import structlog

logger = structlog.get_logger()

MAX_SAMPLES_PER_ENDPOINT = 10000


def get_percentile(samples: list[float], percentile: float) -> float:
    """Nearest-rank percentile; 0.0 when there are no samples."""
    if not samples:
        return 0.0

    ordered = sorted(samples)
    return ordered[min(int(len(ordered) * percentile / 100), len(ordered) - 1)]


def summarize(samples: list[float]) -> dict[str, float]:
    if not samples:
        return {"p50": 0.0, "p90": 0.0, "p99": 0.0, "avg": 0.0}
    return {
        "p50": round(get_percentile(samples, 50), 2),
        "p90": round(get_percentile(samples, 90), 2),
        "p99": round(get_percentile(samples, 99), 2),
        "avg": round(sum(samples) / len(samples), 2),
    }


class LatencyStore:
    """
    Bounded latency samples keyed by route name.

    Request counts keep growing after the sample window for a route is full,
    so counts and percentiles may cover different spans.
    """

    def __init__(self, max_samples: int = MAX_SAMPLES_PER_ENDPOINT):
        self.max_samples = max_samples
        self._samples: dict[str, deque[float]] = {}
        self._counts: dict[str, int] = {}
        self._since = datetime.now(timezone.utc)
        self._lock = threading.Lock()

    def record(self, endpoint: str, latency_ms: float) -> None:
        with self._lock:
            window = self._samples.setdefault(endpoint, deque(maxlen=self.max_samples))
            window.append(latency_ms)
            self._counts[endpoint] = self._counts.get(endpoint, 0) + 1

    def stats(self) -> dict[str, Any]:
        with self._lock:
            windows = {name: list(window) for name, window in self._samples.items()}
            counts = dict(self._counts)
            since = self._since

        by_endpoint = {
            name: {"count": counts[name], **summarize(samples)}
            for name, samples in windows.items()
        }
        all_samples = [s for samples in windows.values() for s in samples]
        return {
            "count": sum(counts.values()),
            **summarize(all_samples),
            "by_endpoint": by_endpoint,
            "since": since.isoformat(),
        }

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()
            self._counts.clear()
            self._since = datetime.now(timezone.utc)


_store = LatencyStore()


def track_latency(endpoint: str) -> Callable:
    """
    Record how long a route handler takes, failures included.

    Usage:
        @router.post("")
        @track_latency("chat")
        async def chat(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                record_latency(endpoint, (time.perf_counter() - start) * 1000)

        return wrapper
    return decorator


def record_latency(endpoint: str, latency_ms: float) -> None:
    _store.record(endpoint, latency_ms)
    logger.debug("Latency recorded", endpoint=endpoint, latency_ms=round(latency_ms, 2))


def get_latency_stats() -> dict[str, Any]:
    """Overall and per-route count, p50/p90/p99 and average in milliseconds."""
    return _store.stats()


def reset_latency_stats() -> None:
    _store.reset()
    logger.info("Latency stats reset")
