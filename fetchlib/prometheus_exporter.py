import logging
import threading
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, start_http_server

from .metrics import Metrics


logger = logging.getLogger(__name__)


class PrometheusExporter:
    def __init__(self, metrics: Metrics, port: int = 8000, registry: CollectorRegistry = REGISTRY) -> None:
        self.metrics = metrics
        self.port = port
        self.registry = registry
        self._update_thread: threading.Thread | None = None
        self._stop_event = threading.Event()

        self.requests_total = Counter('fetch_requests_total', 'Total number of completed GET requests', registry=registry)
        self.bytes_total = Counter('fetch_bytes_total', 'Total number of body bytes received', registry=registry)
        self.errors_total = Counter('fetch_errors_total', 'Total number of transport failures', registry=registry)
        self.cookies_total = Counter('fetch_cookies_total', 'Total number of cookies parsed', registry=registry)
        self.avg_fetch_duration_seconds = Gauge(
            'fetch_avg_duration_seconds', 'Average request duration in seconds', registry=registry
        )

        self._last = None

    def start(self) -> None:
        start_http_server(self.port, registry=self.registry)
        logger.info("Prometheus metrics server started on port %d", self.port)

        self._update_thread = threading.Thread(
            target=self._update_metrics_loop,
            name="prometheus-updater",
            daemon=True
        )
        self._update_thread.start()

    def _update_metrics_loop(self) -> None:
        while not self._stop_event.is_set():
            self.update()
            self._stop_event.wait(5.0)

    def update(self) -> None:
        totals, _ = self.metrics.snapshot()
        last = self._last

        for counter, current, previous in (
            (self.requests_total, totals.requests, last.requests if last else 0),
            (self.bytes_total, totals.bytes, last.bytes if last else 0),
            (self.errors_total, totals.errors, last.errors if last else 0),
            (self.cookies_total, totals.cookies, last.cookies if last else 0),
        ):
            if current > previous:
                counter.inc(current - previous)

        if totals.requests > 0:
            avg_fetch_ms = totals.fetch_ms_sum / totals.requests
            self.avg_fetch_duration_seconds.set(avg_fetch_ms / 1000.0)

        self._last = totals

    def stop(self) -> None:
        self._stop_event.set()
        if self._update_thread:
            self._update_thread.join(timeout=2.0)
        # one last sync so short runs still report their totals
        self.update()
