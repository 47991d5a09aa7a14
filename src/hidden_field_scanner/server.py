"""Minimal HTTP endpoint exposing the scanner as ``POST /scan``."""

from __future__ import annotations

import http.server
import json
import logging
import socketserver
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from .core.config import ScannerConfig
from .core.errors import InputError
from .core.models import ScanReport
from .scan.orchestrator import run_scan, validate_request

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 64 * 1024

ScanRunner = Callable[..., ScanReport]


def handle_scan_request(
    body: bytes,
    config: ScannerConfig,
    runner: ScanRunner = run_scan,
) -> Tuple[int, Dict[str, Any]]:
    """Validates a raw request body, runs the scan and returns ``(status, payload)``."""

    try:
        payload = json.loads(body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError):
        return 400, {
            "message": "Invalid request body",
            "errors": [{"message": "Body must be a JSON object"}],
        }
    if not isinstance(payload, dict):
        return 400, {
            "message": "Invalid request body",
            "errors": [{"message": "Body must be a JSON object"}],
        }

    try:
        url, level = validate_request(payload.get("url"), payload.get("level"))
    except InputError as exc:
        return 400, {"message": "Invalid request body", "errors": exc.errors}

    try:
        report = runner(url, level, config=config)
    except Exception as exc:
        logger.exception("Unexpected failure scanning %s", url)
        return 500, {"error": "Scan failed", "details": str(exc)}
    return 200, report.to_dict()


def _handler_factory(config: ScannerConfig, runner: ScanRunner):
    class RequestHandler(http.server.BaseHTTPRequestHandler):
        def do_GET(self):  # type: ignore[override]
            if self.path.rstrip("/") == "/health":
                self._send_json(200, {"status": "ok"})
                return
            self._send_json(404, {"error": "Not found"})

        def do_POST(self):  # type: ignore[override]
            if self.path.rstrip("/") != "/scan":
                self._send_json(404, {"error": "Not found"})
                return

            try:
                length = int(self.headers.get("Content-Length") or 0)
            except ValueError:
                length = -1
            if length < 0 or length > MAX_BODY_BYTES:
                self._send_json(
                    400,
                    {"message": "Invalid request body", "errors": [{"message": "Invalid Content-Length"}]},
                )
                return

            status, payload = handle_scan_request(self.rfile.read(length), config, runner)
            self._send_json(status, payload)

        def _send_json(self, status: int, payload: Dict[str, Any]) -> None:
            body = json.dumps(payload).encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args) -> None:  # pragma: no cover - routed to logging
            logger.info("%s - %s", self.address_string(), format % args)

    return RequestHandler


class _ThreadingServer(socketserver.ThreadingMixIn, socketserver.TCPServer):
    daemon_threads = True
    allow_reuse_address = True


@dataclass
class ScanServer:
    config: ScannerConfig
    runner: ScanRunner = run_scan
    _server: socketserver.TCPServer | None = None
    _thread: threading.Thread | None = None

    @property
    def address(self) -> Tuple[str, int]:
        if self._server is None:
            return self.config.host, self.config.port
        host, port = self._server.server_address[:2]
        return str(host), int(port)

    def start(self) -> None:
        if self._server:
            return
        handler = _handler_factory(self.config, self.runner)
        self._server = _ThreadingServer((self.config.host, self.config.port), handler)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def serve_forever(self) -> None:
        self.start()
        if self._thread:
            self._thread.join()

    def stop(self) -> None:
        if not self._server:
            return
        self._server.shutdown()
        self._server.server_close()
        self._server = None
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None
