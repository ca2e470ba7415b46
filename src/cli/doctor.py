"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.table import Table

from adapters.http_client import build_async_client
from cli.runtime import console, get_settings
from cli.ui_components import print_banner
from core.config import AppSettings, write_user_env_vars
from core.credentials import load_credentials
from core.domain.errors import CredentialsError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


def _check_credentials(settings: AppSettings) -> tuple[str, str]:
    try:
        credentials = load_credentials(settings.credentials_path)
    except CredentialsError as exc:
        if exc.reason == "not found":
            return "OPTIONAL", "Not logged in (auth login)"
        return "FAIL", exc.reason
    if credentials.is_expired():
        return "EXPIRED", "Run `auth refresh`"
    return "OK", credentials.user_info.email


@app.command()
def run(ctx: typer.Context) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = get_settings(ctx)
    print_banner(console)

    table = Table(title="TRIBE API Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.has_api_key:
        table.add_row("API key", "OK", "TRIBE_API_KEY set")
    else:
        table.add_row("API key", "MISSING", "Placeholder key -> the API will answer 401")
    table.add_row("API base", "OK", settings.api_base)
    table.add_row("Tutor API base", "OK", settings.tutor_api_base)

    cred_status, cred_detail = _check_credentials(settings)
    table.add_row("OAuth credentials", cred_status, cred_detail)

    # Connectivity (best-effort)
    for label, url in (("API connectivity", settings.api_base), ("Tutor connectivity", settings.tutor_api_base)):
        ok_http, detail_http = asyncio.run(_check_http(settings, url))
        table.add_row(label, "OK" if ok_http else "FAIL", detail_http)

    console.print(table)

    if not settings.has_api_key:
        console.print("\n[yellow]Note:[/yellow] run `tribe-examples doctor setup-key` to store an API key.")


@app.command(name="setup-key")
def setup_key() -> None:
    """Interactive API key setup (stores config in the user config .env)."""

    base_url = typer.prompt("API base URL", default="https://tribecode.ai/api", show_default=True).strip()
    api_key = typer.prompt("API key", hide_input=True, confirmation_prompt=False).strip()

    if not base_url or not api_key:
        raise typer.BadParameter("base_url and api key are required")

    env_path = write_user_env_vars(
        {
            "TRIBE_API_BASE": base_url,
            "TRIBE_API_KEY": api_key,
        }
    )

    console.print(f"[green]Saved API config to:[/green] {env_path}")
