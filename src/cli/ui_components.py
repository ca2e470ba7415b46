"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Los campos opcionales ausentes se pintan con placeholders aquí, no en el Core.
"""

from __future__ import annotations

from datetime import datetime

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import (
    ArticleSearchResult,
    BatchTrackResult,
    EventsPage,
    GeneratedInsight,
    IngestResult,
    InsightsPage,
)
from core.services.smoke_suite import CheckResult, SmokeReport

NA = "N/A"


def _s(value: object, default: str = NA) -> str:
    if value is None or value == "":
        return default
    return escape(str(value))


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else NA


def _datetime(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else NA


def print_banner(console: Console) -> None:
    title = Text("TRIBE API", style="bold cyan")
    subtitle = Text("Analytics • Knowledge base • Telemetry", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def render_insights(console: Console, page: InsightsPage) -> None:
    console.print("📊 TRIBE Analytics Insights\n")
    console.print(f"Total insights: {len(page.insights)}")
    console.print(f"Unread: {page.unread_count}\n")

    for index, insight in enumerate(page.insights, start=1):
        console.print(f"{index}. {_s(insight.title)}")
        console.print(f"   Category: {_s(insight.category)} | Priority: {_s(insight.priority)}")
        console.print(f"   {_s(insight.description, '')}")
        console.print(f"   Created: {_date(insight.created_at)}\n")


def render_events(console: Console, page: EventsPage, *, preview: int = 5) -> None:
    console.print("📊 Telemetry Events\n")
    console.print(f"Total events: {page.total_count}")
    console.print(f"Events retrieved: {len(page.events)}")

    if page.stats is not None:
        console.print("\nStats:")
        console.print(f"  Projects: {page.stats.projects}")
        console.print(f"  Tools used: {page.stats.tools_used}")
        console.print(f"  Total tokens: {page.stats.total_tokens}")

    if not page.events:
        return

    table = Table(title="Recent events")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Tool", style="white")
    table.add_column("Project", style="magenta")
    table.add_column("Time", style="green")
    for index, event in enumerate(page.events[:preview], start=1):
        table.add_row(
            str(index),
            _s(event.event_type, "Unknown"),
            _s(event.tool),
            _s(event.project_path),
            _datetime(event.time),
        )
    console.print()
    console.print(table)

    remaining = len(page.events) - preview
    if remaining > 0:
        console.print(f"\n... and {remaining} more events")


def render_tracked_event(console: Console, event_name: str, event_id: object, success: bool) -> None:
    console.print("📊 Event Tracked\n")
    console.print(f"Event: {_s(event_name)}")
    console.print(f"Event ID: {_s(event_id)}")
    console.print("✅ Event tracked successfully" if success else "⚠️  Event was not tracked")


def render_batch_result(console: Console, sent: int, result: BatchTrackResult) -> None:
    console.print("📊 Batch Events Tracked\n")
    console.print(f"Total events sent: {sent}")
    console.print(f"Successfully processed: {result.processed}")
    console.print(f"Failed: {result.failed}\n")
    if result.success:
        console.print("✅ All events tracked successfully")
    else:
        console.print("⚠️  Some events failed to track")


def render_articles(console: Console, query: str, result: ArticleSearchResult) -> None:
    console.print(f'📚 Knowledge Base Search Results for: "{escape(query)}"\n')
    console.print(f"Total results: {result.total}")
    console.print(f"Showing: {len(result.articles)} articles\n")

    for index, article in enumerate(result.articles, start=1):
        tags = ", ".join(tag for tag in article.tags or [] if tag) or "none"
        console.print(f"{index}. {_s(article.title)}")
        console.print(f"   Topic: {_s(article.topic)}")
        console.print(f"   Tags: {escape(tags)}")
        console.print(f"   Updated: {_date(article.updated_at)}\n")


def render_ingest_result(console: Console, result: IngestResult) -> None:
    console.print("✅ Events ingested successfully\n")
    console.print(f"Events processed: {result.events_processed}")
    console.print(f"User ID: {_s(result.user_id)}")


def render_generated_insight(console: Console, insight: GeneratedInsight, *, preview: int = 5) -> None:
    console.print("🤖 AI-Powered Insight Generated\n")
    console.print(f"Title: {_s(insight.title)}")
    console.print(f"Provider: {_s(insight.provider)}")
    console.print(f"Description: {_s(insight.description)}\n")
    console.print("📊 Analysis:")
    console.print(f"   {_s(insight.value)}\n")
    console.print("💡 Recommendation:")
    console.print(f"   {_s(insight.recommendation)}\n")

    scores = insight.event_scores
    if scores:
        console.print(f"🎯 Event Scores ({len(scores)} events):")
        for score in scores[:preview]:
            console.print(f"   Event {_s(score.event_id)}: relevance {_s(score.relevance)}/10")
        if len(scores) > preview:
            console.print(f"   ... and {len(scores) - preview} more")


def render_check_result(console: Console, result: CheckResult) -> None:
    if result.passed:
        console.print(f"Testing {result.name}... ✅ PASS")
    else:
        console.print(f"Testing {result.name}... ❌ FAIL")
        console.print(f"  Error: {_s(result.error)}\n")


def render_smoke_summary(console: Console, report: SmokeReport) -> None:
    console.print("\n" + "=" * 50)
    console.print("Test Results:")
    console.print(f"  Passed: {report.passed}")
    console.print(f"  Failed: {report.failed}")
    console.print(f"  Total:  {report.total}")
    console.print("=" * 50 + "\n")

    if not report.ok:
        console.print("Failed tests:")
        for result in report.results:
            if not result.passed:
                console.print(f"  - {result.name}: {_s(result.error)}")
        console.print()
    else:
        console.print("✅ All tests passed!\n")
