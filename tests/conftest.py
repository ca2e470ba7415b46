"""Shared fixtures: an in-process fixture HTTP server and settings pointing at it."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qsl, urlsplit

import pytest

from adapters.http_client import ApiClient
from core.config import AppSettings
from core.logger import setup_logging


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: dict[str, str]
    headers: dict[str, str]
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))

    def form(self) -> dict[str, str]:
        return dict(parse_qsl(self.body.decode("utf-8")))


@dataclass
class CannedResponse:
    status: int = 200
    body: bytes = b""
    content_type: str = "application/json"
    require_token: str | None = None


@dataclass
class FixtureServer:
    """Test-only HTTP responder bound to an ephemeral local port."""

    routes: dict[tuple[str, str], CannedResponse] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._httpd = ThreadingHTTPServer(("127.0.0.1", 0), self._handler_class())
        self._thread = threading.Thread(target=self._httpd.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
        content_type: str = "application/json",
        require_token: str | None = None,
    ) -> None:
        body = text.encode("utf-8") if text is not None else json.dumps(json_body).encode("utf-8")
        self.routes[(method.upper(), path)] = CannedResponse(status, body, content_type, require_token)

    def last(self, method: str, path: str) -> RecordedRequest:
        for request in reversed(self.requests):
            if request.method == method and request.path == path:
                return request
        raise AssertionError(f"no {method} {path} request recorded")

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()
        self._thread.join(timeout=5)

    def _handler_class(self) -> type[BaseHTTPRequestHandler]:
        server = self

        class Handler(BaseHTTPRequestHandler):
            def _handle(self) -> None:
                parts = urlsplit(self.path)
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                server.requests.append(
                    RecordedRequest(
                        method=self.command,
                        path=parts.path,
                        query=dict(parse_qsl(parts.query)),
                        headers={k.lower(): v for k, v in self.headers.items()},
                        body=body,
                    )
                )

                canned = server.routes.get((self.command, parts.path))
                if canned is None:
                    canned = CannedResponse(404, b'{"error": "Not Found"}')
                elif canned.require_token is not None:
                    if self.headers.get("Authorization") != f"Bearer {canned.require_token}":
                        canned = CannedResponse(401, b'{"error": "Unauthorized"}')

                self.send_response(canned.status)
                self.send_header("Content-Type", canned.content_type)
                self.send_header("Content-Length", str(len(canned.body)))
                self.end_headers()
                self.wfile.write(canned.body)

            do_GET = _handle
            do_POST = _handle

            def log_message(self, format: str, *args: Any) -> None:
                pass

        return Handler


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    setup_logging("WARNING", "console")


@pytest.fixture
def fixture_server():
    server = FixtureServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def settings(fixture_server, tmp_path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_key="test-key",
        api_base=f"{fixture_server.url}/api",
        tutor_api_base=f"{fixture_server.url}/tutor/api",
        oauth_base_url=fixture_server.url,
        oauth_client_id="test-client",
        oauth_client_secret="test-secret",
        home=tmp_path / ".tribe",
    )


@pytest.fixture
def api_client(settings) -> ApiClient:
    return ApiClient(settings)


@pytest.fixture
def tutor_client(settings) -> ApiClient:
    return ApiClient(settings, base_url=settings.tutor_api_base)


@pytest.fixture
def cli_env(fixture_server, tmp_path, monkeypatch) -> dict[str, str]:
    env = {
        "TRIBE_API_KEY": "test-key",
        "TRIBE_API_BASE": f"{fixture_server.url}/api",
        "TRIBE_TUTOR_API_BASE": f"{fixture_server.url}/tutor/api",
        "TRIBE_OAUTH_BASE_URL": fixture_server.url,
        "TRIBE_HOME": str(tmp_path / ".tribe"),
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.chdir(tmp_path)
    return env
