import logging
import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Iterable, List, Optional
from urllib.parse import urlparse

from .types import Cookie


logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_SAME_SITE_VALUES = {"strict": "Strict", "lax": "Lax", "none": "None"}
_LATEST = datetime.max.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def default_path(request_url: str) -> str:
    """Directory of the request path, as used when a cookie has no Path."""
    path = urlparse(request_url).path
    if not path.startswith("/") or path.count("/") == 1:
        return "/"
    return path[: path.rindex("/")]


def _parse_expires(raw: str) -> Optional[datetime]:
    try:
        dt = parsedate_to_datetime(raw)
        if dt is None:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None


def _expires_after(now_dt: datetime, max_age: int) -> datetime:
    if max_age <= 0:
        return datetime.fromtimestamp(0, timezone.utc)
    try:
        return now_dt + timedelta(seconds=max_age)
    except OverflowError:
        # delta-seconds past the representable range are capped
        return _LATEST


def parse_set_cookie(
    header: str, request_url: str, now: Callable[[], datetime] | None = None
) -> Optional[Cookie]:
    parts = header.split(";")
    name, sep, value = parts[0].partition("=")
    name = name.strip()
    if not sep or not name or not _TOKEN_RE.match(name):
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]

    domain = ""
    path = ""
    expires: Optional[datetime] = None
    max_age: Optional[int] = None
    secure = False
    http_only = False
    same_site: Optional[str] = None

    for attr in parts[1:]:
        key, _, val = attr.partition("=")
        key = key.strip().lower()
        val = val.strip()
        if key == "domain" and val:
            domain = val.lstrip(".").lower()
        elif key == "path":
            path = val
        elif key == "expires":
            expires = _parse_expires(val)
        elif key == "max-age":
            try:
                max_age = int(val)
            except ValueError:
                logger.debug("Ignoring non-numeric Max-Age %r on cookie %s", val, name)
        elif key == "secure":
            secure = True
        elif key == "httponly":
            http_only = True
        elif key == "samesite":
            same_site = _SAME_SITE_VALUES.get(val.lower())

    if max_age is not None:
        now_dt = (now or _utcnow)()
        # Max-Age wins over Expires; zero or negative means expire immediately
        expires = _expires_after(now_dt, max_age)
    if not domain:
        domain = (urlparse(request_url).hostname or "").lower()
    if not path.startswith("/"):
        path = default_path(request_url)

    return Cookie(
        name=name,
        value=value,
        domain=domain,
        path=path,
        expires=expires,
        secure=secure,
        http_only=http_only,
        same_site=same_site,
    )


def parse_set_cookie_headers(
    headers: Iterable[str], request_url: str, now: Callable[[], datetime] | None = None
) -> List[Cookie]:
    cookies: List[Cookie] = []
    for header in headers:
        cookie = parse_set_cookie(header, request_url, now=now)
        if cookie is None:
            logger.debug("Skipping malformed Set-Cookie header from %s: %r", request_url, header)
            continue
        cookies.append(cookie)
    return cookies
