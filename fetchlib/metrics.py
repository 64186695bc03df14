import threading
import time
from dataclasses import dataclass, replace


@dataclass
class Totals:
    requests: int = 0
    bytes: int = 0
    errors: int = 0
    cookies: int = 0
    fetch_ms_sum: float = 0.0


class Metrics:
    def __init__(self):
        self._totals = Totals()
        self._lock = threading.Lock()
        self._start = time.time()

    def record_fetch(self, ok: bool, bytes_read: int, fetch_ms: float, cookies: int = 0) -> None:
        with self._lock:
            self._totals.requests += 1
            self._totals.bytes += max(0, bytes_read)
            self._totals.cookies += max(0, cookies)
            if not ok:
                self._totals.errors += 1
            self._totals.fetch_ms_sum += fetch_ms

    def snapshot(self) -> tuple[Totals, float]:
        with self._lock:
            t = replace(self._totals)
        elapsed = max(1e-6, time.time() - self._start)
        return t, elapsed
