"""Wikipedia summary and category lookups (public endpoints, no auth)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary"
ACTION_API = "https://en.wikipedia.org/w/api.php"
MAX_CATEGORIES = 6


@dataclass(frozen=True)
class WikipediaContext:
    summary: Optional[str] = None
    categories: List[str] = field(default_factory=list)


async def fetch_summary(client: httpx.AsyncClient, term: str) -> Optional[str]:
    resp = await client.get(f"{SUMMARY_URL}/{quote(term, safe='')}")
    if resp.status_code != 200:
        return None
    data = resp.json()
    extract = data.get("extract") if isinstance(data, dict) else None
    return extract if isinstance(extract, str) and extract.strip() else None


def parse_categories(data: Any) -> List[str]:
    pages = data.get("query", {}).get("pages") if isinstance(data, dict) else None
    if not isinstance(pages, dict) or not pages:
        return []
    first_page = next(iter(pages.values()))
    cats = first_page.get("categories") if isinstance(first_page, dict) else None
    if not isinstance(cats, list):
        return []
    out: List[str] = []
    for cat in cats:
        title = cat.get("title") if isinstance(cat, dict) else None
        if isinstance(title, str):
            out.append(title.removeprefix("Category:"))
    return out


async def fetch_categories(client: httpx.AsyncClient, term: str, max_count: int = MAX_CATEGORIES) -> List[str]:
    params = {
        "origin": "*",
        "action": "query",
        "prop": "categories",
        "cllimit": str(max_count),
        "format": "json",
        "titles": term,
    }
    resp = await client.get(ACTION_API, params=params)
    if resp.status_code != 200:
        return []
    return parse_categories(resp.json())[:max_count]


async def fetch_wikipedia_context(client: httpx.AsyncClient, term: str) -> Optional[WikipediaContext]:
    """Summary then categories; None when neither produced anything."""
    summary = await fetch_summary(client, term)
    categories = await fetch_categories(client, term)
    if not summary and not categories:
        return None
    return WikipediaContext(summary=summary, categories=categories)


__all__ = [
    "SUMMARY_URL",
    "ACTION_API",
    "WikipediaContext",
    "fetch_summary",
    "fetch_categories",
    "parse_categories",
    "fetch_wikipedia_context",
]
