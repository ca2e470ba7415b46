"""Smoke suite contra una API real.

Ejecuta en secuencia las cuatro llamadas de ejemplo principales y acumula
PASS/FAIL por check. Un fallo no detiene el resto de checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable

from core.domain.errors import ApiClientError
from core.interfaces.api import JsonApi
from core.services.analytics import fetch_insights, sample_batch_events, track_batch_events, track_event
from core.services.knowledge_base import search_knowledge_base


class SmokeCheckFailed(Exception):
    pass


@dataclass
class CheckResult:
    name: str
    passed: bool
    error: str | None = None

    @property
    def status(self) -> str:
        return "PASS" if self.passed else "FAIL"


@dataclass
class SmokeReport:
    results: list[CheckResult] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def ok(self) -> bool:
        return self.failed == 0


async def _check_insights(client: JsonApi) -> None:
    await fetch_insights(client)


async def _check_track_event(client: JsonApi) -> None:
    result = await track_event(
        client,
        event_name="api_smoke_test",
        event_data={"source": "smoke-suite"},
        metadata={"client": "tribe-api-examples"},
    )
    if not result.success or not result.event_id:
        raise SmokeCheckFailed("Event tracking failed")


async def _check_knowledge_base(client: JsonApi) -> None:
    await search_knowledge_base(client, "oauth")


async def _check_batch_events(client: JsonApi) -> None:
    result = await track_batch_events(client, sample_batch_events())
    if not result.success or result.processed == 0:
        raise SmokeCheckFailed("Batch event tracking failed")


CHECKS: list[tuple[str, Callable[[JsonApi], Awaitable[None]]]] = [
    ("Get Insights", _check_insights),
    ("Track Event", _check_track_event),
    ("Search Knowledge Base", _check_knowledge_base),
    ("Track Batch Events", _check_batch_events),
]


async def run_smoke_suite(
    client: JsonApi,
    *,
    on_result: Callable[[CheckResult], None] | None = None,
) -> SmokeReport:
    report = SmokeReport()
    for name, check in CHECKS:
        try:
            await check(client)
            result = CheckResult(name=name, passed=True)
        except (ApiClientError, SmokeCheckFailed) as exc:
            result = CheckResult(name=name, passed=False, error=str(exc))
        report.results.append(result)
        if on_result is not None:
            on_result(result)
    return report
