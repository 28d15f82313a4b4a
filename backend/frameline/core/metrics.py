"""
Process-scoped counters for the relay.

Replaces ad-hoc module globals (connection counters, active-connection sets)
with one collector object that the container hands out as a singleton.
"""
import time
from collections import Counter
from threading import Lock
from typing import Dict


class MetricsCollector:
    """Thread-safe counters plus an active-connection gauge."""

    def __init__(self):
        self._lock = Lock()
        self._counters: Counter = Counter()
        self._active_connections = 0
        self._peak_connections = 0
        self.started_at = time.time()

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._counters[name]

    def connection_opened(self) -> None:
        with self._lock:
            self._active_connections += 1
            self._counters["requests_total"] += 1
            if self._active_connections > self._peak_connections:
                self._peak_connections = self._active_connections

    def connection_closed(self) -> None:
        with self._lock:
            self._active_connections = max(0, self._active_connections - 1)

    def snapshot(self) -> Dict[str, float]:
        with self._lock:
            data = dict(self._counters)
            data["active_connections"] = self._active_connections
            data["peak_connections"] = self._peak_connections
        data["uptime_seconds"] = round(time.time() - self.started_at, 3)
        return data
