"""
Generic-output detection.

A config that passes the confidence gate can still be useless: placeholder
categories and tag-like triggers. Those are turned into a clarification
request instead of being returned.
"""

from __future__ import annotations

from typing import List, Sequence

from tracker_backend.app.schemas import ClarificationResponse, GeneratedTrackerConfig

GENERIC_LOCATION_LABELS = frozenset({"general", "positive", "negative", "neutral"})
GENERIC_TRIGGERS = frozenset({"note", "important", "follow-up", "recurring"})
GENERIC_REJECTION_REASON = "Generated configuration was too generic."


def locations_look_generic(labels: Sequence[str]) -> bool:
    lowered = [label.strip().lower() for label in labels]
    return len(lowered) <= 3 or all(label in GENERIC_LOCATION_LABELS for label in lowered)


def triggers_look_generic(triggers: Sequence[str]) -> bool:
    lowered = [t.strip().lower() for t in triggers]
    return len(lowered) <= 4 and all(t in GENERIC_TRIGGERS for t in lowered)


def is_generic_config(config: GeneratedTrackerConfig) -> bool:
    return locations_look_generic([loc.label for loc in config.locations]) or triggers_look_generic(
        config.triggers
    )


def clarification_questions(name: str, *, conversational: bool) -> List[str]:
    if conversational:
        return [
            f'What specific aspects of "{name}" would you like to track? '
            "For example, timing, categories, triggers, or measurements."
        ]
    return [
        f'When you say "{name}", what exactly do you want to track?',
        "What situations, positions, or activities usually trigger it?",
        "What specific categories should the tracker include (types, contexts, or patterns)?",
    ]


def generic_rejection(name: str, answered: int, confidence_boost: float) -> ClarificationResponse:
    return ClarificationResponse(
        confidence=round(0.3 + confidence_boost, 2),
        final_question=answered >= 2,
        questions=clarification_questions(name, conversational=answered > 0),
        reason=GENERIC_REJECTION_REASON,
    )


__all__ = [
    "GENERIC_LOCATION_LABELS",
    "GENERIC_TRIGGERS",
    "GENERIC_REJECTION_REASON",
    "locations_look_generic",
    "triggers_look_generic",
    "is_generic_config",
    "clarification_questions",
    "generic_rejection",
]
