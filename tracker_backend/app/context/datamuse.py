"""Datamuse "means like" lookup for related terms."""

from __future__ import annotations

from typing import List

import httpx

DATAMUSE_URL = "https://api.datamuse.com/words"
MAX_RELATED = 10


async def fetch_related_terms(client: httpx.AsyncClient, term: str, max_count: int = MAX_RELATED) -> List[str]:
    resp = await client.get(DATAMUSE_URL, params={"ml": term, "max": str(max_count)})
    if resp.status_code != 200:
        return []
    data = resp.json()
    if not isinstance(data, list):
        return []
    terms = [item.get("word") for item in data if isinstance(item, dict)]
    return [t.strip() for t in terms if isinstance(t, str) and t.strip()][:max_count]


__all__ = ["DATAMUSE_URL", "fetch_related_terms"]
