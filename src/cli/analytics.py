"""Comandos de analytics: `insights` y `events`."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from cli.runtime import OutputOption, api_client, console, done, maybe_export, run_call, tutor_client
from cli.ui_components import (
    render_batch_result,
    render_events,
    render_generated_insight,
    render_insights,
    render_tracked_event,
)
from core.services.analytics import (
    fetch_events,
    fetch_insights,
    sample_batch_events,
    track_batch_events,
    track_event,
)
from core.services.tutor import generate_insight

insights_app = typer.Typer(no_args_is_help=True, help="Read and generate analytics insights.")
events_app = typer.Typer(no_args_is_help=True, help="Fetch and track analytics events.")


def _json_object(value: str | None, option: str) -> dict[str, Any] | None:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except ValueError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}", param_hint=option) from exc
    if not isinstance(parsed, dict):
        raise typer.BadParameter("expected a JSON object", param_hint=option)
    return parsed


@insights_app.command("list")
def list_insights(ctx: typer.Context, output: Path | None = OutputOption) -> None:
    """Fetch the analytics insights for the current account."""

    page = run_call(fetch_insights(api_client(ctx)), action="fetching insights")
    render_insights(console, page)
    maybe_export(page, output)
    done()


@insights_app.command("generate")
def generate(
    ctx: typer.Context,
    insight_type: str = typer.Option("usage_analysis", "--type", help="Insight type to generate."),
    time_period: str = typer.Option("7d", "--period", help="Time period analysed (e.g. 7d, 30d)."),
    focus_area: str = typer.Option("code_quality", "--focus", help="Focus area sent as metadata."),
    output: Path | None = OutputOption,
) -> None:
    """Ask the Tutor API to generate an AI-powered insight."""

    insight = run_call(
        generate_insight(
            tutor_client(ctx),
            insight_type=insight_type,
            time_period=time_period,
            focus_area=focus_area,
        ),
        action="generating insight",
    )
    render_generated_insight(console, insight)
    maybe_export(insight, output)
    done()


@events_app.command("list")
def list_events(
    ctx: typer.Context,
    project: str = typer.Option("all", help="Project filter."),
    event_type: str = typer.Option("all", "--event-type", help="Event type filter."),
    time_range: str = typer.Option("7d", "--time-range", help="Time range (e.g. 7d, 30d, all)."),
    limit: int = typer.Option(100, min=1, help="Maximum number of events to retrieve."),
    output: Path | None = OutputOption,
) -> None:
    """Fetch telemetry events with their aggregate stats."""

    page = run_call(
        fetch_events(
            api_client(ctx),
            project=project,
            event_type=event_type,
            time_range=time_range,
            limit=limit,
        ),
        action="fetching events",
    )
    render_events(console, page)
    maybe_export(page, output)
    done()


@events_app.command("track")
def track(
    ctx: typer.Context,
    event_name: str = typer.Argument("api_example_event", help="Event name."),
    data: str | None = typer.Option(None, "--data", help="Event data as a JSON object."),
    metadata: str | None = typer.Option(None, "--metadata", help="Metadata as a JSON object."),
    output: Path | None = OutputOption,
) -> None:
    """Track a single analytics event."""

    event_data = _json_object(data, "--data")
    event_metadata = _json_object(metadata, "--metadata") or {"source": "tribe-api-examples"}
    result = run_call(
        track_event(api_client(ctx), event_name=event_name, event_data=event_data, metadata=event_metadata),
        action="tracking event",
    )
    render_tracked_event(console, event_name, result.event_id, result.success)
    maybe_export(result, output)
    done()


@events_app.command("batch")
def batch(ctx: typer.Context, output: Path | None = OutputOption) -> None:
    """Track the three demo events in a single batch request."""

    events = sample_batch_events()
    result = run_call(track_batch_events(api_client(ctx), events), action="tracking batch events")
    render_batch_result(console, len(events), result)
    maybe_export(result, output)
    done()
