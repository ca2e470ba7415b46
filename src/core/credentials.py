"""Almacén de credenciales OAuth (`<TRIBE_HOME>/tutor/auth.json`).

Reglas:
- El archivo se escribe con permisos 0600.
- `expires_at` se serializa en ISO-8601 UTC (`YYYY-MM-DDTHH:MM:SSZ`).
- Campos requeridos: access_token, refresh_token, expires_at y
  user_info.{id,email,name}.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_serializer

from core.config import PLACEHOLDER_API_KEY, AppSettings
from core.domain.errors import CredentialsError
from core.domain.models import TokenResponse, UserInfo

EXPIRY_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StoredCredentials(BaseModel):
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    token_type: str = "Bearer"
    expires_at: datetime
    user_info: UserInfo
    scopes: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)

    @field_serializer("expires_at", "created_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return _as_utc(value).strftime(EXPIRY_FORMAT)

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or _utcnow()
        return _as_utc(self.expires_at) <= _as_utc(now)


def credentials_from_token(
    token: TokenResponse,
    user: UserInfo,
    *,
    previous_refresh_token: str | None = None,
    now: datetime | None = None,
) -> StoredCredentials:
    """Combina la respuesta del token endpoint con el usuario en un registro persistible."""

    now = now or _utcnow()
    if token.expires_at is not None:
        expires_at = token.expires_at
    else:
        expires_at = now + timedelta(seconds=token.expires_in or 3600)

    refresh_token = token.refresh_token or previous_refresh_token
    if not refresh_token:
        raise CredentialsError("token response", "refresh_token missing")

    return StoredCredentials(
        access_token=token.access_token,
        refresh_token=refresh_token,
        token_type=token.token_type,
        expires_at=expires_at,
        user_info=user,
        scopes=(token.scope or "").split(),
        created_at=now,
    )


def save_credentials(credentials: StoredCredentials, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = credentials.model_dump(mode="json", exclude_none=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
    # O_CREAT no cambia el modo de un archivo existente.
    path.chmod(0o600)
    return path


def load_credentials(path: Path) -> StoredCredentials:
    """Lee y valida `auth.json`. Lanza `CredentialsError` con el motivo concreto."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CredentialsError(path, "not found") from exc
    except OSError as exc:
        raise CredentialsError(path, f"unreadable ({exc.strerror or exc})") from exc

    try:
        data: Any = json.loads(text)
    except ValueError as exc:
        raise CredentialsError(path, f"invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise CredentialsError(path, "expected a JSON object")

    try:
        return StoredCredentials.model_validate(data)
    except ValidationError as exc:
        missing = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise CredentialsError(path, "missing or invalid fields: " + ", ".join(missing)) from exc


def delete_credentials(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def resolve_api_token(settings: AppSettings) -> str:
    """Orden: TRIBE_API_KEY -> access token guardado y vigente -> placeholder.

    Un archivo de credenciales roto o caducado no es fatal aquí: se cae al
    placeholder y el servidor responderá 401.
    """

    if settings.api_key:
        return settings.api_key
    try:
        stored = load_credentials(settings.credentials_path)
    except CredentialsError:
        return PLACEHOLDER_API_KEY
    if stored.is_expired():
        return PLACEHOLDER_API_KEY
    return stored.access_token
