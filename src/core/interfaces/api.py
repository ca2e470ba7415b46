"""Contrato del wrapper HTTP/JSON.

Los servicios del Core dependen de este Protocol, no de httpx: cualquier
objeto con `call` asíncrono sirve (cliente real, fake en tests).
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class JsonApi(Protocol):
    """Una llamada autenticada que devuelve el JSON parseado o lanza un error clasificado."""

    async def call(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> Any:
        ...
