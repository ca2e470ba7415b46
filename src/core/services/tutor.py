"""Operaciones de la Tutor API (base URL alternativa).

- Ingesta de telemetría de herramientas (`/telemetry/ingest`).
- Generación de insights con IA (`/insights/generate`).

A diferencia del batch de analytics, aquí `success: false` es fatal y se
lanza `OperationFailedError`.
"""

from __future__ import annotations

from typing import Sequence

from core.domain.errors import OperationFailedError
from core.domain.models import (
    GeneratedInsight,
    IngestResult,
    InsightGenerationResult,
    TelemetryRecord,
)
from core.interfaces.api import JsonApi
from core.services.payloads import parse_payload

INGEST_PATH = "/telemetry/ingest"
GENERATE_INSIGHT_PATH = "/insights/generate"


async def ingest_telemetry(client: JsonApi, events: Sequence[TelemetryRecord]) -> IngestResult:
    body = {"events": [e.model_dump(mode="json", exclude_none=True) for e in events]}
    payload = await client.call("POST", INGEST_PATH, body=body)
    result = parse_payload(IngestResult, payload, "telemetry ingest")
    if not result.success:
        raise OperationFailedError("Event ingestion failed")
    if not result.events_processed:
        result.events_processed = len(events)
    return result


async def generate_insight(
    client: JsonApi,
    *,
    insight_type: str = "usage_analysis",
    time_period: str = "7d",
    focus_area: str = "productivity",
) -> GeneratedInsight:
    body = {
        "insight_type": insight_type,
        "time_period": time_period,
        "metadata": {"focus_area": focus_area},
    }
    payload = await client.call("POST", GENERATE_INSIGHT_PATH, body=body)
    result = parse_payload(InsightGenerationResult, payload, "generated insight")
    if not result.success or result.insight is None:
        raise OperationFailedError("Insight generation failed")
    return result.insight


def sample_single_event() -> list[TelemetryRecord]:
    return [
        TelemetryRecord(
            event_type="user",
            tool="claude_code",
            project_path="/Users/username/my-project",
            message_text="Refactored authentication module",
            data={"files_changed": 3, "lines_added": 145, "lines_removed": 67},
        )
    ]


def sample_batch_events() -> list[TelemetryRecord]:
    project = "/Users/username/my-project"
    return [
        TelemetryRecord(
            event_type="user",
            tool="claude_code",
            project_path=project,
            message_text="Added user authentication",
        ),
        TelemetryRecord(
            event_type="assistant",
            tool="claude_code",
            project_path=project,
            message_text="Created login component",
            data={"component": "LoginForm.tsx", "framework": "React"},
        ),
        TelemetryRecord(
            event_type="summary",
            tool="claude_code",
            project_path=project,
            message_text="Completed authentication feature",
            data={"feature": "authentication", "status": "completed"},
        ),
    ]
