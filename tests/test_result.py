import pytest

from fetchlib.errors import ResultMisuseError, TransportError
from fetchlib.result import Failure, Success, failure, success


def test_success_and_failure_arms():
    ok = success(b"data")
    err = failure(TransportError("https://x.test/", "connection refused"))
    assert ok.is_success() and not ok.is_failure()
    assert not err.is_success() and err.is_failure()
    assert ok.unwrap() == b"data"
    assert isinstance(err.unwrap_error(), TransportError)


def test_wrong_arm_raises_misuse():
    with pytest.raises(ResultMisuseError):
        success(1).unwrap_error()
    with pytest.raises(ResultMisuseError):
        failure(TransportError("https://x.test/", "boom")).unwrap()


def test_map_only_touches_success():
    assert success(2).map(lambda v: v * 10) == Success(20)
    err = Failure(TransportError("https://x.test/", "boom"))
    assert err.map(lambda v: v * 10) is err


def test_results_are_immutable():
    ok = success("x")
    with pytest.raises(AttributeError):
        ok.value = "y"
