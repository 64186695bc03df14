import itertools
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

from .config import FetchConfig
from .cookies import parse_set_cookie_headers
from .errors import TransportError
from .metrics import Metrics
from .net import HttpTransport, validate_url
from .result import Failure, Result, Success
from .types import Cookie, PendingRequest, RawResponse, RequestState, TransportProtocol


logger = logging.getLogger(__name__)


class FetchClient:
    """Single-shot asynchronous GET requests delivered through callbacks.

    Each call validates the URL synchronously, then runs the request on a
    worker thread owned by the client. The callback is invoked exactly once,
    on that worker thread, with either ``Success`` or ``Failure``.
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        transport: TransportProtocol | None = None,
        metrics: Optional[Metrics] = None,
    ):
        self.config = config or FetchConfig()
        self.transport = transport or HttpTransport(self.config)
        self.metrics = metrics or Metrics()
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, self.config.max_workers), thread_name_prefix="fetch"
        )
        self._pending: Dict[str, PendingRequest] = {}
        self._pending_lock = threading.Lock()
        self._ids = itertools.count(1)
        self._closed = False

    def fetch_body(self, url: str, on_complete: Callable[[Result[bytes]], None]) -> str:
        return self._submit(url, "body", _body_of, on_complete)

    def fetch_cookies(self, url: str, on_complete: Callable[[Result[List[Cookie]]], None]) -> str:
        return self._submit(url, "cookies", _cookies_of, on_complete)

    def in_flight(self) -> List[PendingRequest]:
        with self._pending_lock:
            return list(self._pending.values())

    def close(self, wait: bool = True) -> None:
        with self._pending_lock:
            self._closed = True
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "FetchClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _submit(self, url: str, kind: str, extract: Callable, on_complete: Callable) -> str:
        url = validate_url(url)
        if not callable(on_complete):
            raise TypeError("on_complete must be callable")
        request = PendingRequest(request_id=f"req-{next(self._ids)}", url=url, kind=kind)
        with self._pending_lock:
            if self._closed:
                raise RuntimeError("FetchClient is closed")
            self._pending[request.request_id] = request
            self._executor.submit(self._run, request, extract, on_complete)
        logger.debug("Issued %s %s request for %s", request.request_id, kind, url)
        return request.request_id

    def _run(self, request: PendingRequest, extract: Callable, on_complete: Callable) -> None:
        try:
            result = self._complete(request, extract)
            try:
                on_complete(result)
            except Exception:
                logger.exception("Completion callback for %s raised", request.request_id)
                raise
        finally:
            with self._pending_lock:
                self._pending.pop(request.request_id, None)

    def _complete(self, request: PendingRequest, extract: Callable) -> Result:
        request.state = RequestState.IN_FLIGHT
        t0 = time.perf_counter()
        try:
            response = self.transport.get(request.url)
            result: Result = Success(response).map(lambda r: extract(r, request.url))
        except TransportError as exc:
            result = Failure(exc)
        except Exception as exc:
            logger.exception("Reading %s response for %s failed", request.kind, request.url)
            result = Failure(exc)
        dt_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug(
            "%s finished in %.1f ms (%.1f ms queued)", request.request_id, dt_ms, (t0 - request.started_at) * 1000.0
        )

        if result.is_success():
            request.state = RequestState.SUCCEEDED
            payload = result.unwrap()
            if isinstance(payload, bytes):
                self.metrics.record_fetch(True, len(payload), dt_ms)
            else:
                self.metrics.record_fetch(True, 0, dt_ms, cookies=len(payload))
        else:
            request.state = RequestState.FAILED
            self.metrics.record_fetch(False, 0, dt_ms)
            logger.info("%s for %s failed: %s", request.request_id, request.url, result.unwrap_error())
        return result


def _body_of(response: RawResponse, url: str) -> bytes:
    return response.body


def _cookies_of(response: RawResponse, url: str) -> List[Cookie]:
    return parse_set_cookie_headers(response.header_values("Set-Cookie"), url)
