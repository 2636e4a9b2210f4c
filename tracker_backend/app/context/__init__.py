from .dictionary import DictionaryEntry, lookup_word, parse_dictionary_payload
from .wikipedia import WikipediaContext, fetch_wikipedia_context, parse_categories
from .datamuse import fetch_related_terms
from .gatherer import ContextGatherer, GatheredContext, sanitize_context

__all__ = [
    "DictionaryEntry",
    "lookup_word",
    "parse_dictionary_payload",
    "WikipediaContext",
    "fetch_wikipedia_context",
    "parse_categories",
    "fetch_related_terms",
    "ContextGatherer",
    "GatheredContext",
    "sanitize_context",
]
