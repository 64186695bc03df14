import logging
from typing import Optional

import urllib3
from urllib3 import exceptions as urllib3_exc
from urllib3.util import parse_url
from urllib3.util.retry import Retry

from .config import FetchConfig
from .errors import InvalidURLError, TransportError
from .types import RawResponse


logger = logging.getLogger(__name__)


def validate_url(url: str) -> str:
    if not isinstance(url, str) or not url.strip():
        raise InvalidURLError(str(url), "empty URL")
    url = url.strip()
    try:
        parsed = parse_url(url)
    except urllib3_exc.LocationParseError as exc:
        raise InvalidURLError(url, str(exc)) from exc
    if parsed.scheme not in ("http", "https"):
        raise InvalidURLError(url, f"unsupported scheme {parsed.scheme!r}")
    if not parsed.host:
        raise InvalidURLError(url, "missing host")
    return url


class HttpTransport:
    """Issues a single GET per call on a connection of its own."""

    def __init__(self, config: Optional[FetchConfig] = None):
        self.config = config or FetchConfig()
        if self.config.connect_timeout is None and self.config.read_timeout is None:
            self.timeout = urllib3.Timeout.DEFAULT_TIMEOUT
        else:
            self.timeout = urllib3.Timeout(connect=self.config.connect_timeout, read=self.config.read_timeout)
        self.headers = {"User-Agent": self.config.user_agent} if self.config.user_agent else None
        self.retries = Retry(
            total=None,
            connect=0,
            read=0,
            status=0,
            other=0,
            redirect=self.config.max_redirects,
            raise_on_redirect=False,
            raise_on_status=False,
        )

    def get(self, url: str) -> RawResponse:
        http = urllib3.PoolManager(num_pools=1, maxsize=1, headers=self.headers)
        try:
            response = http.request(
                "GET",
                url,
                timeout=self.timeout,
                retries=self.retries,
                preload_content=True,
            )
        except urllib3_exc.HTTPError as exc:
            logger.debug("GET %s failed: %r", url, exc)
            raise TransportError(url, _describe(exc)) from exc
        finally:
            http.clear()
        logger.debug("GET %s -> %d (%d bytes)", url, response.status, len(response.data or b""))
        return RawResponse(
            status=response.status,
            headers=list(response.headers.iteritems()),
            body=response.data or b"",
        )


def _describe(exc: urllib3_exc.HTTPError) -> str:
    if isinstance(exc, urllib3_exc.MaxRetryError) and exc.reason is not None:
        return str(exc.reason)
    return str(exc) or type(exc).__name__
