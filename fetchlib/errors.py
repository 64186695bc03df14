class FetchError(Exception):
    """Base class for every error raised by fetchlib."""


class TransportError(FetchError):
    """The request could not be completed (DNS, TLS, connect, read)."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{message} ({url})")
        self.url = url
        self.message = message


class InvalidURLError(FetchError, ValueError):
    def __init__(self, url: str, reason: str):
        super().__init__(f"invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class ResultMisuseError(FetchError):
    """Raised when the wrong arm of a result is extracted."""
