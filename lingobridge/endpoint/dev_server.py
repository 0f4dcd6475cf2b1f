"""Local development server that exposes the serverless handler over HTTP."""

from __future__ import annotations

from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Callable, Mapping

from ..config import EndpointConfig
from ..telemetry.logger import RequestLogger
from .handler import handle_event


ROUTES = frozenset({"/translate", "/.netlify/functions/translate"})

EventHandler = Callable[[Mapping[str, Any]], dict[str, Any]]


def make_request_handler(event_handler: EventHandler) -> type[BaseHTTPRequestHandler]:
    """Build a request handler class that forwards matching routes to `event_handler`."""

    class TranslateRequestHandler(BaseHTTPRequestHandler):
        def do_OPTIONS(self) -> None:
            self._dispatch("OPTIONS")

        def do_POST(self) -> None:
            self._dispatch("POST")

        def do_GET(self) -> None:
            self._dispatch("GET")

        def log_message(self, format: str, *args: Any) -> None:
            return None

        def _dispatch(self, method: str) -> None:
            path = self.path.split("?", 1)[0]
            if path not in ROUTES:
                self.send_error(404)
                return

            length = int(self.headers.get("Content-Length") or 0)
            raw_body = self.rfile.read(length) if length > 0 else b""
            event = {
                "httpMethod": method,
                "path": path,
                "headers": dict(self.headers.items()),
                "body": raw_body.decode("utf-8", errors="replace"),
                "isBase64Encoded": False,
            }
            response = event_handler(event)
            body = str(response.get("body", "")).encode("utf-8")

            self.send_response(int(response.get("statusCode", 500)))
            for name, value in response.get("headers", {}).items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

    return TranslateRequestHandler


def create_server(
    config: EndpointConfig,
    host: str = "127.0.0.1",
    port: int = 8888,
    run_logger: RequestLogger | None = None,
) -> HTTPServer:
    """Create an HTTP server bound to `host:port` serving the translate routes."""

    def event_handler(event: Mapping[str, Any]) -> dict[str, Any]:
        return handle_event(event, config, run_logger=run_logger)

    return HTTPServer((host, port), make_request_handler(event_handler))
