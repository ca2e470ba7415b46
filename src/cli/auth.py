"""Comandos `auth`: flujo OAuth y credenciales guardadas."""

from __future__ import annotations

import secrets

import typer
from rich.markup import escape
from rich.table import Table

from adapters.oauth_client import OAuthClient
from cli.runtime import console, fail, get_settings, run_call
from core.config import AppSettings
from core.credentials import (
    StoredCredentials,
    credentials_from_token,
    delete_credentials,
    load_credentials,
    save_credentials,
)
from core.domain.errors import CredentialsError

app = typer.Typer(no_args_is_help=True, help="OAuth login and stored credentials.")


async def _login(settings: AppSettings, code: str) -> StoredCredentials:
    client = OAuthClient(settings)
    token = await client.exchange_code(code)
    user = await client.fetch_user(token.access_token)
    return credentials_from_token(token, user)


async def _refresh(settings: AppSettings, current: StoredCredentials) -> StoredCredentials:
    client = OAuthClient(settings)
    token = await client.refresh(current.refresh_token)
    user = await client.fetch_user(token.access_token)
    return credentials_from_token(token, user, previous_refresh_token=current.refresh_token)


def _load_or_exit(settings: AppSettings) -> StoredCredentials:
    try:
        return load_credentials(settings.credentials_path)
    except CredentialsError as exc:
        raise fail("loading credentials", exc) from exc


@app.command("url")
def url(ctx: typer.Context, state: str | None = typer.Option(None, help="Opaque state value.")) -> None:
    """Print the authorization URL to open in a browser."""

    settings = get_settings(ctx)
    console.print(OAuthClient(settings).authorization_url(state or secrets.token_urlsafe(16)))


@app.command("login")
def login(
    ctx: typer.Context,
    code: str = typer.Option(..., "--code", help="Authorization code returned to the redirect URI."),
) -> None:
    """Exchange an authorization code and store the credentials."""

    settings = get_settings(ctx)
    credentials = run_call(_login(settings, code), action="exchanging authorization code")
    path = save_credentials(credentials, settings.credentials_path)
    console.print(f"[green]Logged in as[/green] {escape(credentials.user_info.email)}")
    console.print(f"Credentials saved to: {escape(str(path))}")


@app.command("refresh")
def refresh(ctx: typer.Context) -> None:
    """Refresh the stored access token."""

    settings = get_settings(ctx)
    current = _load_or_exit(settings)
    credentials = run_call(_refresh(settings, current), action="refreshing token")
    save_credentials(credentials, settings.credentials_path)
    console.print(f"[green]Token refreshed[/green], expires at {credentials.model_dump(mode='json')['expires_at']}")


@app.command("status")
def status(ctx: typer.Context) -> None:
    """Show the stored credentials (never the tokens themselves)."""

    settings = get_settings(ctx)
    credentials = _load_or_exit(settings)
    dumped = credentials.model_dump(mode="json")

    table = Table(title="Stored credentials")
    table.add_column("Field", style="bright_green", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("File", escape(str(settings.credentials_path)))
    table.add_row("User", escape(f"{credentials.user_info.name} <{credentials.user_info.email}>"))
    table.add_row("Token type", escape(credentials.token_type))
    table.add_row("Scopes", escape(" ".join(credentials.scopes)) or "none")
    table.add_row("Expires at", dumped["expires_at"])
    table.add_row("Status", "[red]EXPIRED[/red]" if credentials.is_expired() else "[green]VALID[/green]")
    console.print(table)


@app.command("logout")
def logout(ctx: typer.Context) -> None:
    """Delete the stored credentials."""

    settings = get_settings(ctx)
    if delete_credentials(settings.credentials_path):
        console.print("Stored credentials removed.")
    else:
        console.print("No stored credentials.")
