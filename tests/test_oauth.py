"""OAuth client and `auth` commands against a fixture token endpoint."""

from __future__ import annotations

import os
import stat
from urllib.parse import parse_qs, urlsplit

import pytest
from typer.testing import CliRunner

from adapters.oauth_client import OAuthClient
from cli.main import app
from core.credentials import load_credentials
from core.domain.errors import ApiError, ResponseShapeError

runner = CliRunner()

TOKEN = {
    "access_token": "test-access-token-67890",
    "refresh_token": "test-refresh-token-abcdef",
    "token_type": "Bearer",
    "expires_in": 3600,
    "scope": "read write",
}
USER = {
    "id": "test-user-123",
    "email": "test@example.com",
    "name": "Test User",
    "avatar_url": "https://example.com/avatar.png",
    "login": "testuser",
}


@pytest.fixture
def oauth_routes(fixture_server):
    fixture_server.add("POST", "/oauth/token", json_body=TOKEN)
    fixture_server.add("GET", "/user", json_body=USER, require_token="test-access-token-67890")
    return fixture_server


def test_authorization_url(settings):
    url = OAuthClient(settings).authorization_url("test-state")

    parts = urlsplit(url)
    assert parts.path == "/oauth/authorize"
    assert parse_qs(parts.query) == {
        "response_type": ["code"],
        "client_id": ["test-client"],
        "redirect_uri": ["http://localhost:8080/callback"],
        "scope": ["read write"],
        "state": ["test-state"],
    }


async def test_exchange_code_posts_form(oauth_routes, settings):
    token = await OAuthClient(settings).exchange_code("test-auth-code-12345")

    assert token.access_token == "test-access-token-67890"
    request = oauth_routes.last("POST", "/oauth/token")
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.form() == {
        "grant_type": "authorization_code",
        "code": "test-auth-code-12345",
        "client_id": "test-client",
        "client_secret": "test-secret",
        "redirect_uri": "http://localhost:8080/callback",
    }


async def test_refresh_posts_refresh_grant(oauth_routes, settings):
    await OAuthClient(settings).refresh("test-refresh-token-abcdef")

    form = oauth_routes.last("POST", "/oauth/token").form()
    assert form["grant_type"] == "refresh_token"
    assert form["refresh_token"] == "test-refresh-token-abcdef"


async def test_fetch_user(oauth_routes, settings):
    user = await OAuthClient(settings).fetch_user("test-access-token-67890")

    assert user.email == "test@example.com"


async def test_fetch_user_with_bad_token(oauth_routes, settings):
    with pytest.raises(ApiError) as excinfo:
        await OAuthClient(settings).fetch_user("wrong")

    assert excinfo.value.status_code == 401


async def test_token_response_without_access_token(fixture_server, settings):
    fixture_server.add("POST", "/oauth/token", json_body={"token_type": "Bearer"})

    with pytest.raises(ResponseShapeError):
        await OAuthClient(settings).exchange_code("code")


def test_login_status_logout(cli_env, oauth_routes, tmp_path):
    result = runner.invoke(app, ["auth", "login", "--code", "test-auth-code-12345"])

    assert result.exit_code == 0, result.output
    assert "test@example.com" in result.output
    path = tmp_path / ".tribe" / "tutor" / "auth.json"
    credentials = load_credentials(path)
    assert credentials.access_token == "test-access-token-67890"
    assert credentials.scopes == ["read", "write"]
    if os.name == "posix":
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    status = runner.invoke(app, ["auth", "status"])
    assert status.exit_code == 0, status.output
    assert "VALID" in status.output
    assert "test-access-token-67890" not in status.output

    logout = runner.invoke(app, ["auth", "logout"])
    assert logout.exit_code == 0
    assert not path.exists()


def test_status_with_invalid_file(cli_env, tmp_path):
    path = tmp_path / ".tribe" / "tutor" / "auth.json"
    path.parent.mkdir(parents=True)
    path.write_text("{ invalid json", encoding="utf-8")

    result = runner.invoke(app, ["auth", "status"])

    assert result.exit_code == 1
    assert "invalid JSON" in result.output


def test_login_with_rejected_code(cli_env, fixture_server):
    fixture_server.add("POST", "/oauth/token", status=400, json_body={"error": "invalid_grant"})

    result = runner.invoke(app, ["auth", "login", "--code", "bad"])

    assert result.exit_code == 1
    assert "400" in result.output
