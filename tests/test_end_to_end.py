import threading

import pytest

from fetchlib.client import FetchClient
from fetchlib.config import FetchConfig
from fetchlib.errors import TransportError


def collect():
    results = []
    done = threading.Event()

    def on_complete(result):
        results.append(result)
        done.set()

    return results, done, on_complete


def test_local_body_fetch(http_server):
    results, done, cb = collect()
    with FetchClient() as client:
        client.fetch_body(http_server + "/body", cb)
        assert done.wait(10)
    assert len(results) == 1
    assert results[0].unwrap() == b"hello world"


def test_local_cookie_fetch(http_server):
    results, done, cb = collect()
    with FetchClient() as client:
        client.fetch_cookies(http_server + "/cookies", cb)
    cookies = results[0].unwrap()
    assert [c.name for c in cookies] == ["session", "theme"]
    session, theme = cookies
    assert session.http_only and session.is_session
    assert theme.secure and theme.same_site == "Lax" and theme.expires is not None
    assert session.domain == "127.0.0.1"


def test_local_no_cookies(http_server):
    results, done, cb = collect()
    with FetchClient() as client:
        client.fetch_cookies(http_server + "/no-cookies", cb)
    assert results[0].is_success()
    assert results[0].unwrap() == []


def test_unreachable_host_fails_once(closed_port_url):
    results, done, cb = collect()
    with FetchClient(FetchConfig(connect_timeout=2.0, read_timeout=2.0)) as client:
        client.fetch_body(closed_port_url, cb)
    assert len(results) == 1
    assert isinstance(results[0].unwrap_error(), TransportError)


@pytest.mark.network
def test_public_endpoint_body():
    results, done, cb = collect()
    with FetchClient(FetchConfig(connect_timeout=10.0, read_timeout=10.0)) as client:
        client.fetch_body("https://jsonplaceholder.typicode.com/posts/1", cb)
        assert done.wait(15)
    assert len(results) == 1
    assert len(results[0].unwrap()) > 0


@pytest.mark.network
def test_public_endpoint_cookies():
    results, done, cb = collect()
    with FetchClient(FetchConfig(connect_timeout=10.0, read_timeout=10.0)) as client:
        client.fetch_cookies("https://www.google.com/", cb)
    assert len(results) == 1
    assert results[0].is_success()
