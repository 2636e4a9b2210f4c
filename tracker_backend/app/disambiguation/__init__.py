from .local_terms import LOCAL_AMBIGUOUS_TERMS
from .resolver import get_local_ambiguity_fallback, levenshtein
from .service import DisambiguationService, fill_interpretation_band, parse_ambiguity_output

__all__ = [
    "LOCAL_AMBIGUOUS_TERMS",
    "get_local_ambiguity_fallback",
    "levenshtein",
    "DisambiguationService",
    "fill_interpretation_band",
    "parse_ambiguity_output",
]
