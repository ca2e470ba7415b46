"""Utilidades compartidas por los comandos.

- Settings construidas una vez en el callback raíz y leídas desde `ctx.obj`.
- `run_call`: ejecuta la corrutina y traduce cualquier error clasificado a
  una línea en stderr + exit code 1.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Coroutine, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from adapters.http_client import ApiClient
from adapters.json_exporter import export_payload_json
from core.config import AppSettings
from core.domain.errors import ApiClientError, ApiError, CredentialsError
from core.logger import get_logger

T = TypeVar("T")

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

logger = get_logger(__name__)

OutputOption = typer.Option(
    None,
    "--output",
    "-o",
    help="Write the validated payload as JSON to this path.",
    dir_okay=False,
)


def get_settings(ctx: typer.Context) -> AppSettings:
    settings = ctx.obj
    if not isinstance(settings, AppSettings):
        settings = AppSettings()
        ctx.obj = settings
    return settings


def api_client(ctx: typer.Context) -> ApiClient:
    return ApiClient(get_settings(ctx))


def tutor_client(ctx: typer.Context) -> ApiClient:
    settings = get_settings(ctx)
    return ApiClient(settings, base_url=settings.tutor_api_base)


def fail(action: str, exc: Exception) -> typer.Exit:
    err_console.print(f"❌ Error {action}: {escape(str(exc))}")
    if isinstance(exc, ApiError) and exc.is_authentication_error:
        err_console.print("Check TRIBE_API_KEY or run `tribe-examples auth login`.")
    return typer.Exit(code=1)


def run_call(coro: Coroutine[Any, Any, T], *, action: str) -> T:
    try:
        return asyncio.run(coro)
    except (ApiClientError, CredentialsError) as exc:
        logger.info("command_failed", action=action, error_type=type(exc).__name__)
        raise fail(action, exc) from exc


def maybe_export(payload: Any, output: Path | None) -> None:
    if output is None:
        return
    path = export_payload_json(payload=payload, output_path=output)
    console.print(f"[green]Saved JSON to:[/green] {escape(str(path))}")


def done() -> None:
    console.print("\n✅ Done")
