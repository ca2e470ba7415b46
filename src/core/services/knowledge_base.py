"""Búsqueda en la knowledge base."""

from __future__ import annotations

from core.domain.models import ArticleSearchResult
from core.interfaces.api import JsonApi
from core.services.payloads import parse_payload

ARTICLES_PATH = "/knowledge-base/articles"


async def search_knowledge_base(client: JsonApi, query: str = "oauth", *, limit: int = 5) -> ArticleSearchResult:
    payload = await client.call("GET", ARTICLES_PATH, query={"search": query, "limit": str(limit)})
    return parse_payload(ArticleSearchResult, payload, "knowledge base articles")
