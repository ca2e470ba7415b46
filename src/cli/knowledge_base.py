"""Comando `kb`: búsqueda en la knowledge base."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.runtime import OutputOption, api_client, console, done, maybe_export, run_call
from cli.ui_components import render_articles
from core.services.knowledge_base import search_knowledge_base

app = typer.Typer(no_args_is_help=True, help="Search the knowledge base.")


@app.command("search")
def search(
    ctx: typer.Context,
    query: str = typer.Argument("oauth", help="Search terms."),
    limit: int = typer.Option(5, min=1, help="Maximum number of articles."),
    output: Path | None = OutputOption,
) -> None:
    """Search knowledge-base articles."""

    result = run_call(
        search_knowledge_base(api_client(ctx), query, limit=limit),
        action="searching knowledge base",
    )
    render_articles(console, query, result)
    maybe_export(result, output)
    done()
