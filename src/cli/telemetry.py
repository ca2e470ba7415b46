"""Comando `telemetry`: ingesta de eventos en la Tutor API."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.runtime import OutputOption, console, done, maybe_export, run_call, tutor_client
from cli.ui_components import render_ingest_result
from core.services.tutor import ingest_telemetry, sample_batch_events, sample_single_event

app = typer.Typer(no_args_is_help=True, help="Ingest tool telemetry into the Tutor API.")


@app.command("ingest")
def ingest(
    ctx: typer.Context,
    single: bool = typer.Option(False, "--single", help="Send one event instead of the demo batch."),
    output: Path | None = OutputOption,
) -> None:
    """Send the demo telemetry events."""

    console.print("🚀 TRIBE Telemetry Event Ingestion Example\n")
    events = sample_single_event() if single else sample_batch_events()
    result = run_call(ingest_telemetry(tutor_client(ctx), events), action="ingesting events")
    render_ingest_result(console, result)
    maybe_export(result, output)
    done()
