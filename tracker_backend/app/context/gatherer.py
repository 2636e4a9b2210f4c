"""
Best-effort context collection for prompt enrichment.

Client-supplied context always wins; only the missing sources are fetched.
Each source is awaited on its own and any failure (timeout, non-2xx, bad
JSON) just leaves that source empty. Nothing here ever raises to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

import httpx

from tracker_backend.app.config.redaction import safe_error_detail
from tracker_backend.app.security.sanitizer import sanitize_external_response

from .datamuse import fetch_related_terms
from .dictionary import lookup_word
from .wikipedia import fetch_wikipedia_context

logger = logging.getLogger(__name__)

DEFINITION_CHARS = 300
SUMMARY_CHARS = 500
CATEGORY_CHARS = 60
RELATED_TERM_CHARS = 40
MAX_DEFINITIONS = 5
MAX_CATEGORIES = 6
MAX_RELATED_TERMS = 10


@dataclass(frozen=True)
class GatheredContext:
    definition: Optional[str] = None
    all_definitions: List[str] = field(default_factory=list)
    wiki_summary: Optional[str] = None
    wiki_categories: List[str] = field(default_factory=list)
    related_terms: List[str] = field(default_factory=list)

    @property
    def has_dictionary_hit(self) -> bool:
        return bool(self.all_definitions) or bool((self.definition or "").strip())


def _clean_list(items: List[str], max_chars: int, max_items: int) -> List[str]:
    cleaned = [sanitize_external_response(item, max_chars) for item in items]
    return [item for item in cleaned if item][:max_items]


def sanitize_context(context: GatheredContext) -> GatheredContext:
    """Strip and bound every piece of context before it is placed in a prompt."""
    definition = sanitize_external_response(context.definition, DEFINITION_CHARS) if context.definition else ""
    summary = sanitize_external_response(context.wiki_summary, SUMMARY_CHARS) if context.wiki_summary else ""
    return GatheredContext(
        definition=definition or None,
        all_definitions=_clean_list(context.all_definitions, DEFINITION_CHARS, MAX_DEFINITIONS),
        wiki_summary=summary or None,
        wiki_categories=_clean_list(context.wiki_categories, CATEGORY_CHARS, MAX_CATEGORIES),
        related_terms=_clean_list(context.related_terms, RELATED_TERM_CHARS, MAX_RELATED_TERMS),
    )


class ContextGatherer:
    def __init__(
        self,
        *,
        enabled: bool = True,
        timeout_seconds: float = 4.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.enabled = enabled
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def gather(self, term: str, supplied: Optional[GatheredContext] = None) -> GatheredContext:
        context = supplied or GatheredContext()
        if not self.enabled or not (term or "").strip():
            return context
        if self._client is not None:
            return await self._fill(self._client, term, context)
        async with httpx.AsyncClient(timeout=self.timeout_seconds, follow_redirects=True) as client:
            return await self._fill(client, term, context)

    async def _fill(self, client: httpx.AsyncClient, term: str, context: GatheredContext) -> GatheredContext:
        if not context.has_dictionary_hit:
            try:
                entry = await lookup_word(client, term)
                if entry is not None:
                    context = replace(
                        context,
                        definition=entry.definition or None,
                        all_definitions=list(entry.all_definitions),
                    )
            except Exception as exc:  # noqa: BLE001
                logger.info("[CONTEXT] dictionary lookup dropped", extra={"error": safe_error_detail(exc)})

        if not context.wiki_summary and not context.wiki_categories:
            try:
                wiki = await fetch_wikipedia_context(client, term)
                if wiki is not None:
                    context = replace(context, wiki_summary=wiki.summary, wiki_categories=list(wiki.categories))
            except Exception as exc:  # noqa: BLE001
                logger.info("[CONTEXT] wikipedia lookup dropped", extra={"error": safe_error_detail(exc)})

        if not context.related_terms:
            try:
                related = await fetch_related_terms(client, term)
                if related:
                    context = replace(context, related_terms=related)
            except Exception as exc:  # noqa: BLE001
                logger.info("[CONTEXT] datamuse lookup dropped", extra={"error": safe_error_detail(exc)})

        return context


__all__ = ["GatheredContext", "ContextGatherer", "sanitize_context"]
