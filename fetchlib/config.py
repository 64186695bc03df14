from dataclasses import dataclass
from typing import Optional


DEFAULT_MAX_WORKERS = 4
DEFAULT_MAX_REDIRECTS = 10


@dataclass(frozen=True)
class FetchConfig:
    max_workers: int = DEFAULT_MAX_WORKERS
    # None leaves the timeout to urllib3's default
    connect_timeout: Optional[float] = None
    read_timeout: Optional[float] = None
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    user_agent: Optional[str] = None
