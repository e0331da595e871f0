"""In-process latency and error tracking.

Both trackers are process-wide and only feed the health endpoint and logs;
nothing depends on them for correctness.
"""

import logging
import threading
from collections import deque

logger = logging.getLogger(__name__)

LATENCY_WINDOW = 100
MAX_ERROR_KEYS = 100


class PerformanceMonitor:
    """Keeps the last ``window`` latencies (ms) per endpoint."""

    def __init__(self, window: int = LATENCY_WINDOW) -> None:
        self.window = window
        self._latencies: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def record_latency(self, endpoint: str, latency_ms: float) -> None:
        with self._lock:
            samples = self._latencies.get(endpoint)
            if samples is None:
                samples = self._latencies[endpoint] = deque(maxlen=self.window)
            samples.append(latency_ms)

    def average_latency(self, endpoint: str) -> float:
        with self._lock:
            samples = list(self._latencies.get(endpoint, ()))
        if not samples:
            return 0.0
        return sum(samples) / len(samples)

    def summary(self) -> dict[str, dict[str, float]]:
        """Snapshot of avg/count/max/min per endpoint."""
        with self._lock:
            snapshot = {endpoint: list(samples) for endpoint, samples in self._latencies.items()}

        return {
            endpoint: {
                "avg": round(sum(samples) / len(samples)),
                "count": len(samples),
                "max": max(samples),
                "min": min(samples),
            }
            for endpoint, samples in snapshot.items()
            if samples
        }

    def reset(self) -> None:
        with self._lock:
            self._latencies.clear()


class ErrorTracker:
    """Counts unexpected errors by ``ExceptionType:message``.

    Once ``max_keys`` distinct messages are tracked, new ones are counted
    under ``ExceptionType:<other>``.
    """

    def __init__(self, max_keys: int = MAX_ERROR_KEYS) -> None:
        self.max_keys = max_keys
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def track_error(self, error: BaseException, **context) -> int:
        """Record an error, log it with context, and return how often it has occurred."""
        key = f"{type(error).__name__}:{error}"
        with self._lock:
            if key not in self._counts and len(self._counts) >= self.max_keys:
                key = f"{type(error).__name__}:<other>"
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count

        logger.error(
            f"Application error ({count}x): {key} | context={context}",
            exc_info=error,
        )
        return count

    def summary(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()


performance_monitor = PerformanceMonitor()
error_tracker = ErrorTracker()
