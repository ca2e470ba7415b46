"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/OAuth) lean config de forma consistente.

La CLI construye `AppSettings` una sola vez por proceso y la pasa hacia abajo.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "your_api_key_here"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "tribe-api-examples"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "tribe-api-examples"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tribe-api-examples"
    return Path.home() / ".config" / "tribe-api-examples"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# TRIBE API examples user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    env_path.chmod(0o600)
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Un único contrato de configuración para CLI/adapters: la API key, las
    URLs base y los parámetros del flujo OAuth.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRIBE_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="Bearer token para la API de analytics (TRIBE_API_KEY).",
    )
    api_base: str = Field(
        default="https://tribecode.ai/api",
        min_length=8,
        description="Base URL de la API de analytics/knowledge-base.",
    )
    tutor_api_base: str = Field(
        default="http://localhost:8080/api",
        min_length=8,
        description="Base URL alternativa (Tutor API: telemetry ingest, insight generation).",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="tribe-api-examples/0.1",
        min_length=1,
        description="User-Agent enviado en cada request.",
    )

    home: Path = Field(
        default_factory=lambda: Path.home() / ".tribe",
        description="Directorio raíz de la CLI (TRIBE_HOME); guarda tutor/auth.json.",
    )

    oauth_base_url: str = Field(
        default="https://tribecode.ai",
        min_length=8,
        description="Origen del servidor OAuth (authorize/token/user).",
    )
    oauth_client_id: str = Field(
        default="tribe-cli",
        min_length=1,
        description="Client ID registrado para la CLI.",
    )
    oauth_client_secret: str | None = Field(
        default=None,
        description="Client secret (opcional para clientes públicos).",
    )
    oauth_redirect_uri: str = Field(
        default="http://localhost:8080/callback",
        description="Redirect URI registrada para el authorization code flow.",
    )
    oauth_scopes: str = Field(
        default="read write",
        description="Scopes solicitados, separados por espacios.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (stderr).",
    )
    log_format: str = Field(
        default="console",
        pattern="^(json|console)$",
        description="Renderer de structlog: json o console.",
    )

    @field_validator("home")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def credentials_path(self) -> Path:
        return self.home / "tutor" / "auth.json"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY
