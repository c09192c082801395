from __future__ import annotations
from collections import Counter
from typing import Any, Dict, Optional
import threading
import time


class Telemetry:
    """
    Process counters for the engine: cache hits/misses, upstream and target
    failures (with the most recent error), and the last successful compute.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._counters: Counter = Counter()
        self._gauges: Dict[str, float] = {}
        self._last_compute: Optional[float] = None
        self._last_error: Optional[Dict[str, Any]] = None

    def incr(self, key: str, value: int = 1) -> None:
        with self._lock:
            self._counters[key] += value

    def record_failure(self, counter: str, exc: BaseException) -> None:
        with self._lock:
            self._counters[counter] += 1
            self._last_error = {
                "counter": counter,
                "type": type(exc).__name__,
                "message": str(exc),
                "at": self._clock(),
            }

    def mark_computed(self, trade_count: int) -> None:
        with self._lock:
            self._gauges["engine_last_trade_count"] = float(trade_count)
            self._last_compute = self._clock()

    def get_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            now = self._clock()
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "last_compute_age_s": None if self._last_compute is None else now - self._last_compute,
                "last_error": dict(self._last_error) if self._last_error else None,
            }


# Shared by services that are not handed their own instance
telemetry = Telemetry()
