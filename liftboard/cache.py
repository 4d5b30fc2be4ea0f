from __future__ import annotations

import threading
import time
from typing import Any, Callable


class TtlCache:
    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.time):
        self.ttl_seconds = max(0.0, float(ttl_seconds))
        self._clock = clock
        self._guard = threading.Lock()
        self.value: Any = None
        self.timestamp: float | None = None

    def is_stale(self, now: float) -> bool:
        if self.timestamp is None or self.ttl_seconds <= 0:
            return True
        return (now - self.timestamp) >= self.ttl_seconds

    def get(self) -> Any:
        with self._guard:
            if self.is_stale(self._clock()):
                return None
            return self.value

    def set(self, value: Any, now: float | None = None) -> None:
        with self._guard:
            self.value = value
            self.timestamp = self._clock() if now is None else now

    def get_or_load(self, loader: Callable[[], Any]) -> Any:
        with self._guard:
            now = self._clock()
            if not self.is_stale(now):
                return self.value
            value = loader()
            self.value = value
            self.timestamp = now
            return value
