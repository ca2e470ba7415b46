"""Wrapper de httpx para la API HTTP/JSON.

Responsabilidad:
- Construir el request (método, URL, query, headers, body JSON opcional).
- Enviarlo, inspeccionar el status y parsear el JSON.
- Devolver el payload o lanzar un error clasificado (`core.domain.errors`).

Sin reintentos, sin caché: cada llamada abre y cierra su propio cliente.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx

from core.config import AppSettings
from core.credentials import resolve_api_token
from core.domain.errors import ApiError, MalformedResponseError, TransportError
from core.domain.models import ApiRequest, ApiResponse
from core.logger import get_logger

logger = get_logger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    `transport` permite inyectar un `httpx.MockTransport` en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def join_url(base_url: str, path: str) -> str:
    """Concatena base URL y path conservando el prefijo de la base (p.ej. `/api`)."""

    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def to_api_response(response: httpx.Response) -> ApiResponse:
    """Normaliza un `httpx.Response`; solo parsea JSON si el status es 2xx."""

    text = response.text
    if not response.is_success:
        return ApiResponse(status_code=response.status_code, body_text=text)
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        return ApiResponse(status_code=response.status_code, body_text=text, parse_error=str(exc))
    return ApiResponse(status_code=response.status_code, body_text=text, parsed_body=parsed)


def unwrap(result: ApiResponse) -> Any:
    """Devuelve el payload parseado o lanza `ApiError` / `MalformedResponseError`."""

    if not result.ok:
        raise ApiError(result.status_code, result.body_text)
    if result.parse_error is not None:
        raise MalformedResponseError(result.status_code, result.body_text, result.parse_error)
    return result.parsed_body


class ApiClient:
    """Una llamada HTTP autenticada contra una base URL configurada.

    La configuración se inyecta explícitamente (`AppSettings`); no se lee
    estado global en tiempo de llamada.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        base_url: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.base_url = base_url or self._settings.api_base
        self._token = token or resolve_api_token(self._settings)
        self._transport = transport

    def build_request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> ApiRequest:
        return ApiRequest(
            method=method.upper(),
            path=path,
            query=dict(query) if query is not None else None,
            body=body,
            auth_token=self._token,
        )

    async def send(self, request: ApiRequest) -> ApiResponse:
        """Ejecuta el round-trip. Solo lanza `TransportError`; el status lo clasifica `unwrap`."""

        url = join_url(self.base_url, request.path)
        headers = {
            "Authorization": f"Bearer {request.auth_token}",
            "Content-Type": "application/json",
        }
        content = json.dumps(request.body) if request.body is not None else None

        logger.debug("api_request", method=request.method, url=url, query=request.query)
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.request(
                    request.method,
                    url,
                    params=request.query,
                    headers=headers,
                    content=content,
                )
        except httpx.TransportError as exc:
            logger.debug("api_transport_error", url=url, error=str(exc))
            raise TransportError(f"Request to {url} failed: {exc!r}", cause=exc) from exc

        logger.debug("api_response", url=url, status_code=response.status_code)
        return to_api_response(response)

    async def call(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        request = self.build_request(method, path, query=query, body=body)
        return unwrap(await self.send(request))

    async def get(self, path: str, query: Mapping[str, str] | None = None) -> Any:
        return await self.call("GET", path, query=query)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.call("POST", path, body=body)
