"""Two-arm outcome type delivered to fetch callbacks."""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from .errors import ResultMisuseError

T = TypeVar("T")
U = TypeVar("U")


class _ResultMixin:
    def is_success(self) -> bool:
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        return not self.is_success()


@dataclass(frozen=True)
class Success(_ResultMixin, Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value

    def unwrap_error(self) -> BaseException:
        raise ResultMisuseError(f"unwrap_error() called on a success holding {type(self.value).__name__}")

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure(_ResultMixin):
    error: BaseException

    def unwrap(self) -> Any:
        raise ResultMisuseError(f"unwrap() called on a failure: {self.error}")

    def unwrap_error(self) -> BaseException:
        return self.error

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self


Result = Union[Success[T], Failure]


def success(value: T) -> Success[T]:
    return Success(value)


def failure(error: BaseException) -> Failure:
    return Failure(error)
