"""
Local ambiguity resolution.

Pure functions over the curated term map. This runs before any network
call and its answer is final: a curated term is never sent to the model.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from tracker_backend.app.schemas import AmbiguityCheckResult, Interpretation
from tracker_backend.app.utils.text import normalize_term

from .local_terms import LOCAL_AMBIGUOUS_TERMS

MAX_TYPO_DISTANCE = 2


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost insert/delete/substitute."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def closest_term(normalized: str, max_distance: int = MAX_TYPO_DISTANCE) -> Optional[Tuple[str, int]]:
    """
    Nearest curated key within ``max_distance``.

    Keys whose length differs by more than ``max_distance`` cannot match and
    are skipped. Ties keep the first key in map order.
    """
    best: Optional[Tuple[str, int]] = None
    for key in LOCAL_AMBIGUOUS_TERMS:
        if abs(len(key) - len(normalized)) > max_distance:
            continue
        distance = levenshtein(normalized, key)
        if distance <= max_distance and (best is None or distance < best[1]):
            best = (key, distance)
    return best


def interpretations_for(key: str) -> List[Interpretation]:
    return [
        Interpretation(value=value, label=label, description=description)
        for value, label, description in LOCAL_AMBIGUOUS_TERMS[key]
    ]


def not_ambiguous(reason: str) -> AmbiguityCheckResult:
    return AmbiguityCheckResult(is_ambiguous=False, reason=reason, interpretations=[])


def get_local_ambiguity_fallback(name: str) -> AmbiguityCheckResult:
    """
    Resolve ``name`` against the curated term map.

    Exact (case-insensitive) hits and near misses within two edits come back
    ambiguous with the curated interpretations; near misses also carry
    ``suggested_correction``. Anything else is reported as not ambiguous so
    the caller can continue to the model classifier.
    """
    normalized = normalize_term(name)
    if not normalized:
        return not_ambiguous("Empty tracker name.")

    if normalized in LOCAL_AMBIGUOUS_TERMS:
        return AmbiguityCheckResult(
            is_ambiguous=True,
            reason=f'"{name.strip()}" can mean several different things to track.',
            interpretations=interpretations_for(normalized),
        )

    match = closest_term(normalized)
    if match is not None:
        key, _ = match
        return AmbiguityCheckResult(
            is_ambiguous=True,
            reason=f'Did you mean "{key}"?',
            interpretations=interpretations_for(key),
            suggested_correction=key,
        )

    return not_ambiguous("Not in the local ambiguous term list.")


__all__ = [
    "MAX_TYPO_DISTANCE",
    "levenshtein",
    "closest_term",
    "interpretations_for",
    "not_ambiguous",
    "get_local_ambiguity_fallback",
]
