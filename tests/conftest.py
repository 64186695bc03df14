import os
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


ROUTES = {
    "/body": (200, [("Content-Type", "text/plain")], b"hello world"),
    "/cookies": (
        200,
        [
            ("Set-Cookie", "session=abc123; Path=/; HttpOnly"),
            ("Set-Cookie", "theme=dark; Max-Age=3600; Secure; SameSite=Lax"),
            ("Set-Cookie", "no-equals-sign-here"),
        ],
        b"ok",
    ),
    "/no-cookies": (200, [], b"plain"),
    "/missing": (404, [("Content-Type", "text/plain")], b"not here"),
    "/redirect": (302, [("Location", "/body")], b""),
}


class StubHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        status, headers, body = ROUTES.get(self.path, (404, [], b""))
        self.send_response(status)
        for name, value in headers:
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), StubHandler)
    thread = threading.Thread(target=server.serve_forever, name="stub-http", daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def closed_port_url():
    # bind then release so nothing is listening on the port
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return f"http://127.0.0.1:{port}/"


def pytest_collection_modifyitems(config, items):
    if os.environ.get("FETCHLIB_NETWORK_TESTS") == "1":
        return
    skip = pytest.mark.skip(reason="set FETCHLIB_NETWORK_TESTS=1 to run tests against the public internet")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip)
