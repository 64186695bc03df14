#!/usr/bin/env python3
import argparse
import logging
import sys
import threading

from fetchlib.client import FetchClient
from fetchlib.config import DEFAULT_MAX_WORKERS, FetchConfig
from fetchlib.errors import InvalidURLError
from fetchlib.prometheus_exporter import PrometheusExporter


PREVIEW_BYTES = 500


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch response bodies or cookies with single-shot GET requests.")
    parser.add_argument("mode", choices=["body", "cookies"], help="What to read from each response.")
    parser.add_argument("urls", nargs="+", help="One or more URLs, fetched concurrently.")
    parser.add_argument("--timeout", type=float, default=None, help="Connect and read timeout in seconds (default: none).")
    parser.add_argument("--workers", type=int, default=DEFAULT_MAX_WORKERS, help="Number of worker threads.")
    parser.add_argument("--user-agent", default=None, help="User-Agent header to send (default: none).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    parser.add_argument("--prometheus-port", type=int, default=None, help="Serve Prometheus metrics on this port.")
    return parser.parse_args(argv)


class Reporter:
    """Prints completions as they arrive from worker threads."""

    def __init__(self, mode: str, out=None):
        self.mode = mode
        self.out = out or sys.stdout
        self.failed = 0
        self._lock = threading.Lock()
        self._done = threading.Semaphore(0)

    def callback_for(self, url: str):
        def on_complete(result) -> None:
            try:
                self.report(url, result)
            except Exception:
                with self._lock:
                    self.failed += 1
                raise
            finally:
                self._done.release()

        return on_complete

    def report(self, url: str, result) -> None:
        with self._lock:
            if result.is_failure():
                self.failed += 1
                print(f"{url}: error: {result.unwrap_error()}", file=self.out)
            elif self.mode == "body":
                body = result.unwrap()
                print(f"{url}: {len(body)} bytes", file=self.out)
                print(body[:PREVIEW_BYTES].decode("utf-8", errors="replace"), file=self.out)
            else:
                cookies = result.unwrap()
                print(f"{url}: {len(cookies)} cookies", file=self.out)
                for c in cookies:
                    expiry = c.expires.isoformat() if c.expires else "session"
                    flags = " secure" if c.secure else ""
                    print(f"  {c.name}={c.value} domain={c.domain} path={c.path} expires={expiry}{flags}", file=self.out)

    def wait(self, count: int) -> None:
        for _ in range(count):
            self._done.acquire()


def run(args: argparse.Namespace, out=None) -> int:
    config = FetchConfig(
        max_workers=max(1, args.workers),
        connect_timeout=args.timeout,
        read_timeout=args.timeout,
        user_agent=args.user_agent,
    )
    reporter = Reporter(args.mode, out=out)
    exporter = None
    with FetchClient(config) as client:
        if args.prometheus_port is not None:
            exporter = PrometheusExporter(client.metrics, port=args.prometheus_port)
            exporter.start()
        issued = 0
        invalid = False
        try:
            for url in args.urls:
                if args.mode == "body":
                    client.fetch_body(url, reporter.callback_for(url))
                else:
                    client.fetch_cookies(url, reporter.callback_for(url))
                issued += 1
        except InvalidURLError as exc:
            logging.error("%s", exc)
            invalid = True
        reporter.wait(issued)
        if exporter:
            exporter.stop()
    totals, elapsed = client.metrics.snapshot()
    logging.info(
        "Finished %d requests in %.2fs: errors=%d, bytes=%d, cookies=%d",
        totals.requests, elapsed, totals.errors, totals.bytes, totals.cookies,
    )
    if invalid:
        return 2
    return 1 if reporter.failed else 0


def main() -> None:
    args = parse_args()
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
