"""
HTTP endpoints for the PWA plugin.

Routes (both ``POST``, JSON in and out):

``/plugin/open-bamz-pwa/saveManifest``
    body ``{"manifestData": "<web-app-manifest JSON>"}``; stored verbatim as
    the application's ``manifest.json``.
``/plugin/open-bamz-pwa/build``
    runs one full service-worker build.

The target application comes from the ``appName`` query parameter or the
``X-App-Name`` header.  When a token is configured the request must carry
``Authorization: Bearer <token>``.
"""

import http.server
import json
import threading
import urllib.parse
from typing import Any

from pwa_precache.config import APP_PARAM, DEFAULT_HOST, DEFAULT_PORT, PLUGIN_ID
from pwa_precache.core.builder import PrecacheBuilder
from pwa_precache.errors import Forbidden, PrecacheError, Unauthorized
from pwa_precache.scaffold import save_manifest
from pwa_precache.utils.log import log

ROUTE_PREFIX = f"/plugin/{PLUGIN_ID}"


class PrecacheHandler(http.server.BaseHTTPRequestHandler):
    """Request handler; configured through class attributes by
    ``PrecacheServer``."""

    builder: PrecacheBuilder
    token: str | None = None

    def log_message(self, fmt: str, *args: Any) -> None:  # noqa: D401
        """Route default HTTP request logging through the package logger."""
        log.debug("[HTTP] " + fmt, *args)

    # -- helpers ----------------------------------------------------------

    def _send_json(self, status: int, payload: dict) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_body(self) -> bytes:
        length = int(self.headers.get("Content-Length", 0) or 0)
        return self.rfile.read(length) if length > 0 else b""

    def _read_json(self) -> dict:
        raw = self._body
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PrecacheError(f"Invalid JSON body: {exc}", status_code=400) from exc
        if not isinstance(data, dict):
            raise PrecacheError("JSON body must be an object", status_code=400)
        return data

    def _app_name(self, query: dict[str, list[str]]) -> str:
        app_name = (query.get(APP_PARAM) or [""])[0] or self.headers.get("X-App-Name", "")
        if not app_name:
            raise PrecacheError("Missing application name", status_code=400)
        return app_name

    def _authorize(self, app_name: str) -> None:
        if self.token:
            auth = self.headers.get("Authorization", "")
            if auth != f"Bearer {self.token}":
                raise Unauthorized("Authentication required")
        if not self.builder.registry.has_capability(app_name):
            raise Forbidden(f"PWA plugin is not enabled for {app_name}")

    # -- routes -----------------------------------------------------------

    def do_POST(self) -> None:  # noqa: N802
        parsed = urllib.parse.urlsplit(self.path)
        query = urllib.parse.parse_qs(parsed.query)
        # drained before any reply, including early errors
        self._body = self._read_body()
        routes = {
            f"{ROUTE_PREFIX}/saveManifest": self._save_manifest,
            f"{ROUTE_PREFIX}/build": self._build,
        }
        handler = routes.get(parsed.path.rstrip("/"))
        if handler is None:
            self._send_json(404, {"error": f"No route for {parsed.path}"})
            return

        try:
            app_name = self._app_name(query)
            self._authorize(app_name)
            handler(app_name)
        except Exception as exc:
            status = getattr(exc, "status_code", 500)
            if not isinstance(status, int):
                status = 500
            log.error("[HTTP] %s failed: %s", parsed.path, exc)
            self._send_json(status, {"error": str(exc) or exc.__class__.__name__})

    def _save_manifest(self, app_name: str) -> None:
        data = self._read_json()
        app_fs = self.builder.file_systems.get_file_system(app_name)
        save_manifest(app_fs, data.get("manifestData"))
        log.info("[HTTP] Saved manifest for %s", app_name)
        self._send_json(200, {"success": True})

    def _build(self, app_name: str) -> None:
        result = self.builder.build(app_name)
        self._send_json(200, {"success": True, "count": result.count,
                              "warnings": result.warnings})


class PrecacheServer:
    """Threaded HTTP server exposing the plugin endpoints."""

    def __init__(
        self,
        builder: PrecacheBuilder,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        token: str | None = None,
    ) -> None:
        handler = type("BoundPrecacheHandler", (PrecacheHandler,), {
            "builder": builder,
            "token": token,
        })
        self.httpd = http.server.ThreadingHTTPServer((host, port), handler)
        self._thread: threading.Thread | None = None

    @property
    def address(self) -> tuple[str, int]:
        host, port = self.httpd.server_address[:2]
        return host, port

    def start(self) -> None:
        """Serve on a daemon thread."""
        self._thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
        self._thread.start()
        log.info("[HTTP] Listening on %s:%d", *self.address)

    def serve_forever(self) -> None:
        log.info("[HTTP] Listening on %s:%d", *self.address)
        self.httpd.serve_forever()

    def stop(self) -> None:
        self.httpd.shutdown()
        self.httpd.server_close()
        if self._thread is not None:
            self._thread.join()
