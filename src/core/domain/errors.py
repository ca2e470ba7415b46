"""Taxonomía de errores del cliente.

Todos son terminales para la llamada individual: no hay reintentos. La CLI
los traduce a un mensaje de una línea en stderr y exit code 1.
"""

from __future__ import annotations


class ApiClientError(Exception):
    """Base de todos los fallos de una llamada a la API."""


class TransportError(ApiClientError):
    """Fallo de red/conexión antes de recibir cualquier respuesta."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ApiError(ApiClientError):
    """El servidor respondió con un status fuera de 2xx."""

    def __init__(self, status_code: int, body_text: str) -> None:
        super().__init__(f"API error: {status_code} - {body_text}")
        self.status_code = status_code
        self.body_text = body_text

    @property
    def is_authentication_error(self) -> bool:
        return self.status_code == 401

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def category(self) -> str:
        if self.is_authentication_error:
            return "authentication"
        if self.is_client_error:
            return "client"
        if self.is_server_error:
            return "server"
        return "unexpected"


class MalformedResponseError(ApiClientError):
    """Respuesta 2xx cuyo body no es JSON válido."""

    def __init__(self, status_code: int, body_text: str, reason: str) -> None:
        super().__init__(f"Malformed response ({status_code}): {reason}")
        self.status_code = status_code
        self.body_text = body_text
        self.reason = reason


class ResponseShapeError(ApiClientError):
    """JSON válido al que le faltan campos requeridos por el llamador."""

    def __init__(self, resource: str, detail: str) -> None:
        super().__init__(f"Invalid response structure for {resource}: {detail}")
        self.resource = resource
        self.detail = detail


class OperationFailedError(ApiClientError):
    """La API devolvió `success: false` en una operación que lo trata como fatal."""


class CredentialsError(Exception):
    """El archivo de credenciales no se puede leer, no es JSON o está incompleto."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
