from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


SLOW_ROUTE_SECONDS = 3.0


class _Handler(BaseHTTPRequestHandler):
    def log_message(self, format: str, *args) -> None:  # noqa: A002
        return

    def _send(self, status: int, body: str = "", headers: dict[str, str] | None = None) -> None:
        body_bytes = body.encode("utf-8")
        self.send_response(status)
        for k, v in (headers or {}).items():
            self.send_header(k, v)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body_bytes)))
        self.end_headers()
        try:
            self.wfile.write(body_bytes)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def do_GET(self) -> None:  # noqa: N802
        if self.path == "/ok":
            self._send(200, "ok")
        elif self.path == "/no_content":
            self.send_response(204)
            self.end_headers()
        elif self.path == "/unavailable":
            self._send(503, "Service Unavailable")
        elif self.path == "/redirect":
            self.send_response(302)
            self.send_header("Location", "/no_content")
            self.send_header("Content-Length", "0")
            self.end_headers()
        elif self.path.startswith("/sleep/"):
            time.sleep(float(self.path.rsplit("/", 1)[-1]))
            self._send(200, "slept")
        elif self.path == "/slow":
            time.sleep(SLOW_ROUTE_SECONDS)
            self._send(200, "too late")
        else:
            self._send(404, "Not Found")


class _Server(ThreadingHTTPServer):
    daemon_threads = True


@pytest.fixture(scope="session")
def local_server_base_url() -> str:
    httpd = _Server(("127.0.0.1", 0), _Handler)
    host, port = httpd.server_address[:2]
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()

    try:
        yield f"http://{host}:{port}"
    finally:
        httpd.shutdown()
        thread.join(timeout=5)
        httpd.server_close()
