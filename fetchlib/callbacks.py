from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class CallbackBox(Generic[T]):
    """Holds a single ``(T) -> None`` callback."""

    __slots__ = ("_callback",)

    def __init__(self, callback: Callable[[T], None]):
        if not callable(callback):
            raise TypeError(f"callback must be callable, got {type(callback).__name__}")
        self._callback = callback

    @property
    def callback(self) -> Callable[[T], None]:
        return self._callback

    def invoke(self, value: T) -> None:
        return self._callback(value)

    def __call__(self, value: T) -> None:
        return self.invoke(value)
