from __future__ import annotations
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Optional
import time


@dataclass(frozen=True)
class CacheEntry:
    timestamp: float
    data: Any


class ResultCache:
    """
    Short-lived result cache keyed by endpoint. Entries older than `ttl_seconds`
    are treated as absent. There is no single-flight: two callers missing at the
    same time both recompute and the later put() wins.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.timestamp >= self.ttl_seconds:
                return None
            return entry

    def put(self, key: str, value: Any, timestamp: Optional[float] = None) -> CacheEntry:
        entry = CacheEntry(timestamp=self._clock() if timestamp is None else timestamp, data=value)
        with self._lock:
            self._entries[key] = entry
        return entry

    def get_age(self, key: str) -> Optional[float]:
        with self._lock:
            entry = self._entries.get(key)
            if not entry:
                return None
            return self._clock() - entry.timestamp

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
