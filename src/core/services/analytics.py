"""Operaciones de analytics: insights, eventos y tracking.

Cada función es una instanciación del wrapper (`JsonApi.call`) con su path,
query/body y la validación de la forma de respuesta.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Sequence

from core.domain.models import (
    BatchTrackResult,
    EventsPage,
    InsightsPage,
    TrackedEvent,
    TrackEventResult,
)
from core.interfaces.api import JsonApi
from core.services.payloads import parse_payload

INSIGHTS_PATH = "/analytics/insights"
EVENTS_PATH = "/analytics/events"
EVENTS_BATCH_PATH = "/analytics/events/batch"


async def fetch_insights(client: JsonApi) -> InsightsPage:
    payload = await client.call("GET", INSIGHTS_PATH)
    return parse_payload(InsightsPage, payload, "insights")


async def fetch_events(
    client: JsonApi,
    *,
    project: str = "all",
    event_type: str = "all",
    time_range: str = "all",
    limit: int = 100,
) -> EventsPage:
    query = {
        "project": project,
        "eventType": event_type,
        "timeRange": time_range,
        "limit": str(limit),
    }
    payload = await client.call("GET", EVENTS_PATH, query=query)
    return parse_payload(EventsPage, payload, "events")


async def track_event(
    client: JsonApi,
    *,
    event_name: str,
    event_data: dict[str, Any] | None = None,
    metadata: dict[str, Any] | None = None,
) -> TrackEventResult:
    body = {
        "event_name": event_name,
        "event_data": event_data or {},
        "metadata": metadata or {},
    }
    payload = await client.call("POST", EVENTS_PATH, body=body)
    return parse_payload(TrackEventResult, payload, "tracked event")


async def track_batch_events(client: JsonApi, events: Sequence[TrackedEvent]) -> BatchTrackResult:
    body = {"events": [e.model_dump(mode="json", exclude_none=True) for e in events]}
    payload = await client.call("POST", EVENTS_BATCH_PATH, body=body)
    return parse_payload(BatchTrackResult, payload, "batch events")


def sample_batch_events(now: datetime | None = None) -> list[TrackedEvent]:
    """Los tres eventos de demo, separados un segundo entre sí."""

    now = now or datetime.now(timezone.utc)
    return [
        TrackedEvent(
            event_name="page_view",
            event_data={"page": "/dashboard", "user_agent": "API-Example"},
            timestamp=now,
        ),
        TrackedEvent(
            event_name="button_click",
            event_data={"button_id": "create_project", "location": "header"},
            timestamp=now + timedelta(seconds=1),
        ),
        TrackedEvent(
            event_name="api_call",
            event_data={"endpoint": "/api/projects", "method": "POST", "duration_ms": 234},
            timestamp=now + timedelta(seconds=2),
        ),
    ]
