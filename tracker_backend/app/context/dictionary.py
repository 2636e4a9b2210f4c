"""Free Dictionary API lookup (https://dictionaryapi.dev)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

DICTIONARY_API_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"
MAX_DEFINITIONS = 5
MAX_EXAMPLES = 3
MAX_SYNONYMS = 10


@dataclass(frozen=True)
class DictionaryEntry:
    word: str
    definition: str
    all_definitions: List[str] = field(default_factory=list)
    part_of_speech: Optional[str] = None
    examples: List[str] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)


def _meanings(entry: dict) -> List[dict]:
    meanings = entry.get("meanings")
    return [m for m in meanings if isinstance(m, dict)] if isinstance(meanings, list) else []


def _definitions(meaning: dict) -> List[dict]:
    defs = meaning.get("definitions")
    return [d for d in defs if isinstance(d, dict)] if isinstance(defs, list) else []


def parse_dictionary_payload(data: Any) -> Optional[DictionaryEntry]:
    """Reduce an API answer to the first entry's definitions, examples and synonyms."""
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    entry = data[0]
    meanings = _meanings(entry)

    all_definitions: List[str] = []
    examples: List[str] = []
    synonyms: List[str] = []
    for meaning in meanings:
        pos = meaning.get("partOfSpeech") or "unknown"
        for d in _definitions(meaning):
            text = d.get("definition")
            if isinstance(text, str) and text and len(all_definitions) < MAX_DEFINITIONS:
                all_definitions.append(f"({pos}) {text}")
            example = d.get("example")
            if isinstance(example, str) and example and len(examples) < MAX_EXAMPLES:
                examples.append(example)
        syns = meaning.get("synonyms")
        if isinstance(syns, list):
            synonyms.extend(s for s in syns if isinstance(s, str))

    first_meaning = meanings[0] if meanings else {}
    first_defs = _definitions(first_meaning)
    first = first_defs[0].get("definition") if first_defs else None

    return DictionaryEntry(
        word=str(entry.get("word") or ""),
        definition=first if isinstance(first, str) else "",
        all_definitions=all_definitions,
        part_of_speech=first_meaning.get("partOfSpeech"),
        examples=examples,
        synonyms=synonyms[:MAX_SYNONYMS],
    )


async def lookup_word(client: httpx.AsyncClient, word: str) -> Optional[DictionaryEntry]:
    """
    Fetch a word's definitions.

    Returns None when the word is unknown (404). Other non-2xx answers and
    transport failures raise; the gatherer decides what to drop.
    """
    normalized = (word or "").strip().lower()
    if not normalized:
        return None
    resp = await client.get(f"{DICTIONARY_API_URL}/{quote(normalized, safe='')}")
    if resp.status_code == 404:
        return None
    resp.raise_for_status()
    return parse_dictionary_payload(resp.json())


__all__ = ["DICTIONARY_API_URL", "DictionaryEntry", "parse_dictionary_payload", "lookup_word"]
