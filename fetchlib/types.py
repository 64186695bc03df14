import enum
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol, Tuple


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    domain: str
    path: str = "/"
    expires: Optional[datetime] = None
    secure: bool = False
    http_only: bool = False
    same_site: Optional[str] = None

    @property
    def is_session(self) -> bool:
        return self.expires is None


@dataclass(frozen=True)
class RawResponse:
    status: int
    headers: List[Tuple[str, str]]
    body: bytes

    def header_values(self, name: str) -> List[str]:
        lname = name.lower()
        return [v for k, v in self.headers if k.lower() == lname]


class RequestState(enum.Enum):
    CREATED = "created"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PendingRequest:
    request_id: str
    url: str
    kind: str
    state: RequestState = RequestState.CREATED
    started_at: float = field(default_factory=time.perf_counter)

    @property
    def done(self) -> bool:
        return self.state in (RequestState.SUCCEEDED, RequestState.FAILED)


class TransportProtocol(Protocol):
    def get(self, url: str) -> RawResponse: ...
