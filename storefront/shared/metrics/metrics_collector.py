import threading
from typing import Dict

from storefront.shared.logger import StoreLogger


class MetricsCollector:
    """
    Counters shared by a component (API calls, order operations, bus deliveries).
    Increments are thread-safe; `report` emits the current values through the logger.
    """
    def __init__(self, logger: StoreLogger):
        self.logger = logger
        self._counters: Dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, key: str, amount: int = 1):
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + amount

    def report(self):
        """Emit structured log of current metrics"""
        with self._lock:
            if self._counters:
                self.logger.info("Metrics update", extra=self._counters.copy())

    def get(self, key: str) -> int:
        with self._lock:
            return self._counters.get(key, 0)
