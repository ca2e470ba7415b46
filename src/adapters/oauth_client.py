"""Cliente OAuth (authorization code flow) para la CLI.

- `authorization_url`: URL que el usuario abre en el navegador.
- `exchange_code` / `refresh`: POST form-encoded a `/oauth/token`.
- `fetch_user`: GET `/user` con el access token.

Usa la misma clasificación de errores que `ApiClient`.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

import httpx

from adapters.http_client import build_async_client, join_url, to_api_response, unwrap
from core.config import AppSettings
from core.domain.errors import TransportError
from core.domain.models import TokenResponse, UserInfo
from core.logger import get_logger
from core.services.payloads import parse_payload

logger = get_logger(__name__)


class OAuthClient:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    def authorization_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self._settings.oauth_client_id,
            "redirect_uri": self._settings.oauth_redirect_uri,
            "scope": self._settings.oauth_scopes,
            "state": state,
        }
        return f"{join_url(self._settings.oauth_base_url, '/oauth/authorize')}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> TokenResponse:
        payload = await self._token_request({"grant_type": "authorization_code", "code": code})
        return parse_payload(TokenResponse, payload, "oauth token")

    async def refresh(self, refresh_token: str) -> TokenResponse:
        payload = await self._token_request({"grant_type": "refresh_token", "refresh_token": refresh_token})
        return parse_payload(TokenResponse, payload, "oauth token")

    async def fetch_user(self, access_token: str) -> UserInfo:
        url = join_url(self._settings.oauth_base_url, "/user")
        headers = {"Authorization": f"Bearer {access_token}"}
        payload = await self._send("GET", url, headers=headers)
        return parse_payload(UserInfo, payload, "user info")

    async def _token_request(self, form: dict[str, str]) -> Any:
        data = {**form, "client_id": self._settings.oauth_client_id}
        if self._settings.oauth_client_secret:
            data["client_secret"] = self._settings.oauth_client_secret
        if form.get("grant_type") == "authorization_code":
            data["redirect_uri"] = self._settings.oauth_redirect_uri
        url = join_url(self._settings.oauth_base_url, "/oauth/token")
        return await self._send("POST", url, data=data)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> Any:
        logger.debug("oauth_request", method=method, url=url)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.request(method, url, headers=headers, data=data)
        except httpx.TransportError as exc:
            raise TransportError(f"Request to {url} failed: {exc!r}", cause=exc) from exc
        logger.debug("oauth_response", url=url, status_code=response.status_code)
        return unwrap(to_api_response(response))
