"""Comando `smoke`: ejecuta la smoke suite contra la API configurada."""

from __future__ import annotations

import asyncio
from functools import partial

import typer

from cli.runtime import api_client, console, err_console, get_settings
from cli.ui_components import render_check_result, render_smoke_summary
from core.services.smoke_suite import run_smoke_suite


def smoke(ctx: typer.Context) -> None:
    """Run the API smoke suite (requires a real TRIBE_API_KEY)."""

    settings = get_settings(ctx)
    console.print("🧪 TRIBE API Test Suite\n")
    console.print(f"Testing API at: {settings.api_base}")
    console.print(f"API Key: {'Set ✓' if settings.has_api_key else 'Not Set ✗'}\n")

    if not settings.has_api_key:
        err_console.print("❌ ERROR: TRIBE_API_KEY environment variable not set")
        err_console.print("\nTo run tests, set your API key:")
        err_console.print('export TRIBE_API_KEY="sk_live_your_key_here"\n')
        raise typer.Exit(code=1)

    report = asyncio.run(run_smoke_suite(api_client(ctx), on_result=partial(render_check_result, console)))
    render_smoke_summary(console, report)
    if not report.ok:
        raise typer.Exit(code=1)
