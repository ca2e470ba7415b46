"""Tests for the authenticated HTTP/JSON call wrapper."""

from __future__ import annotations

import json
import socket

import httpx
import pytest

from adapters.http_client import ApiClient, join_url
from core.config import PLACEHOLDER_API_KEY, AppSettings
from core.credentials import StoredCredentials, save_credentials
from core.domain.errors import ApiError, MalformedResponseError, TransportError
from core.domain.models import UserInfo


async def test_call_returns_parsed_body_unchanged(fixture_server, api_client):
    payload = {"insights": [{"title": "A", "nested": {"x": [1, 2.5, None, True]}}], "unreadCount": 2}
    fixture_server.add("GET", "/api/analytics/insights", json_body=payload)

    result = await api_client.call("GET", "/analytics/insights")

    assert result == payload


async def test_call_sends_bearer_and_json_headers(fixture_server, api_client):
    fixture_server.add("GET", "/api/analytics/insights", json_body={})

    await api_client.get("/analytics/insights")

    request = fixture_server.last("GET", "/api/analytics/insights")
    assert request.headers["authorization"] == "Bearer test-key"
    assert request.headers["content-type"] == "application/json"


async def test_query_parameters_are_encoded(fixture_server, api_client):
    fixture_server.add("GET", "/api/knowledge-base/articles", json_body={"total": 0, "articles": []})

    await api_client.get("/knowledge-base/articles", {"search": "oauth & tokens", "limit": "5"})

    request = fixture_server.last("GET", "/api/knowledge-base/articles")
    assert request.query == {"search": "oauth & tokens", "limit": "5"}


async def test_post_serializes_json_body(fixture_server, api_client):
    fixture_server.add("POST", "/api/analytics/events", json_body={"event_id": "evt_1", "success": True})
    body = {"event_name": "page_view", "event_data": {"page": "/"}, "metadata": {}}

    result = await api_client.post("/analytics/events", body)

    assert result == {"event_id": "evt_1", "success": True}
    assert fixture_server.last("POST", "/api/analytics/events").json() == body


@pytest.mark.parametrize(
    ("status", "category"),
    [(401, "authentication"), (400, "client"), (404, "client"), (500, "server"), (503, "server")],
)
async def test_non_2xx_raises_api_error(fixture_server, api_client, status, category):
    fixture_server.add("GET", "/api/analytics/insights", status=status, text='{"insights": []}')

    with pytest.raises(ApiError) as excinfo:
        await api_client.call("GET", "/analytics/insights")

    assert excinfo.value.status_code == status
    assert excinfo.value.body_text == '{"insights": []}'
    assert excinfo.value.category == category
    assert str(status) in str(excinfo.value)


async def test_error_body_is_kept_as_text(fixture_server, api_client):
    fixture_server.add("GET", "/api/analytics/events", status=502, text="<html>Bad gateway</html>", content_type="text/html")

    with pytest.raises(ApiError) as excinfo:
        await api_client.call("GET", "/analytics/events")

    assert excinfo.value.is_server_error
    assert excinfo.value.body_text == "<html>Bad gateway</html>"


@pytest.mark.parametrize("text", ["{not json", "", '{"total": 13, "articles": ['])
async def test_2xx_with_invalid_json_raises_malformed(fixture_server, api_client, text):
    fixture_server.add("GET", "/api/knowledge-base/articles", text=text)

    with pytest.raises(MalformedResponseError) as excinfo:
        await api_client.call("GET", "/knowledge-base/articles")

    assert excinfo.value.status_code == 200
    assert excinfo.value.body_text == text


async def test_send_keeps_status_and_body_on_error(fixture_server, api_client):
    fixture_server.add("GET", "/api/analytics/insights", status=500, text='{"error": "boom"}')

    response = await api_client.send(api_client.build_request("GET", "/analytics/insights"))

    assert response.status_code == 500
    assert response.body_text == '{"error": "boom"}'
    assert response.parsed_body is None
    assert response.parse_error is None


async def test_connection_refused_raises_transport_error(settings):
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    client = ApiClient(settings, base_url=f"http://127.0.0.1:{port}/api")

    with pytest.raises(TransportError) as excinfo:
        await client.call("GET", "/analytics/insights")

    assert isinstance(excinfo.value.cause, httpx.ConnectError)


async def test_timeout_raises_transport_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = ApiClient(settings, transport=httpx.MockTransport(handler))

    with pytest.raises(TransportError):
        await client.call("GET", "/analytics/insights")


async def test_placeholder_key_is_rejected_as_api_error(fixture_server, settings):
    fixture_server.add("GET", "/api/analytics/insights", json_body={"insights": []}, require_token="real-key")
    unauthenticated = settings.model_copy(update={"api_key": None})
    client = ApiClient(unauthenticated)

    with pytest.raises(ApiError) as excinfo:
        await client.call("GET", "/analytics/insights")

    assert excinfo.value.status_code == 401
    assert excinfo.value.is_authentication_error
    request = fixture_server.last("GET", "/api/analytics/insights")
    assert request.headers["authorization"] == f"Bearer {PLACEHOLDER_API_KEY}"


async def test_stored_access_token_is_used_without_api_key(fixture_server, settings):
    fixture_server.add("GET", "/api/analytics/insights", json_body={"insights": []}, require_token="stored-token-12345")
    save_credentials(
        StoredCredentials(
            access_token="stored-token-12345",
            refresh_token="stored-refresh-67890",
            expires_at="2999-12-31T23:59:59Z",
            user_info=UserInfo(id="u1", email="stored@example.com", name="Stored User"),
        ),
        settings.credentials_path,
    )
    client = ApiClient(settings.model_copy(update={"api_key": None}))

    assert await client.call("GET", "/analytics/insights") == {"insights": []}


def test_get_request_rejects_body():
    client = ApiClient(AppSettings(_env_file=None, api_key="k"))

    with pytest.raises(ValueError):
        client.build_request("GET", "/analytics/events", body={"a": 1})


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    [
        ("https://tribecode.ai/api", "/analytics/events", "https://tribecode.ai/api/analytics/events"),
        ("https://tribecode.ai/api/", "analytics/events", "https://tribecode.ai/api/analytics/events"),
        ("http://localhost:8080/api", "/telemetry/ingest", "http://localhost:8080/api/telemetry/ingest"),
    ],
)
def test_join_url_keeps_base_prefix(base, path, expected):
    assert join_url(base, path) == expected


async def test_json_fixture_round_trips(fixture_server, api_client):
    fixture = {"totalCount": 7532, "events": [{"event_type": "user", "time": "2025-01-01T00:00:00Z"}], "stats": {"projects": 2}}
    fixture_server.add("GET", "/api/analytics/events", text=json.dumps(fixture, indent=4))

    assert await api_client.get("/analytics/events") == json.loads(json.dumps(fixture))
