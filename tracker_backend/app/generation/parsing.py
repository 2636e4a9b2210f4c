"""
Generation output reading.

The decoded JSON is inspected field by field and reduced to exactly one of
``ShapeA`` (a usable config), ``ShapeB`` (a clarification request),
``GenericRejected`` or ``InvalidOutput``. The generic check reads the raw
location and trigger lists before any field validation. Optional text
fields the model leaves out are filled from the default config; the
required ones make the output invalid when missing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from tracker_backend.app.llm_output import (
    LLMOutputError,
    as_bool,
    as_confidence,
    as_text,
    bounded_text,
    parse_llm_object,
)
from tracker_backend.app.schemas import ClarificationResponse, GeneratedTrackerConfig, LocationOption
from tracker_backend.app.utils.text import slugify

from .defaults import get_generic_config
from .generic import clarification_questions, locations_look_generic, triggers_look_generic

REQUIRED_CONFIG_FIELDS = (
    "intensityLabel",
    "intensityScale",
    "locationLabel",
    "addButtonLabel",
    "formTitle",
    "emptyStateTitle",
    "locations",
    "triggers",
)
INTENSITY_SCALES = ("low_bad", "high_bad", "neutral")
MAX_LOCATIONS = 10
MAX_TRIGGERS = 12
MAX_HASHTAGS = 8
EMPTY_STATE_BULLETS = 3
LABEL_CHARS = 80
TEXT_CHARS = 300
QUESTION_CHARS = 300
DEFAULT_CLARIFICATION_REASON = "More detail is needed to build a specific tracker."

# wire key -> model attribute, for the optional text fields
_OPTIONAL_TEXT_FIELDS = {
    "intensityMinLabel": "intensity_min_label",
    "intensityMaxLabel": "intensity_max_label",
    "locationPlaceholder": "location_placeholder",
    "triggersLabel": "triggers_label",
    "notesLabel": "notes_label",
    "notesPlaceholder": "notes_placeholder",
    "emptyStateDescription": "empty_state_description",
    "entryTitle": "entry_title",
    "deleteConfirmMessage": "delete_confirm_message",
}
_REQUIRED_TEXT_FIELDS = {
    "intensityLabel": "intensity_label",
    "locationLabel": "location_label",
    "addButtonLabel": "add_button_label",
    "formTitle": "form_title",
    "emptyStateTitle": "empty_state_title",
}


@dataclass(frozen=True)
class ShapeA:
    config: GeneratedTrackerConfig
    confidence: Optional[float] = None


@dataclass(frozen=True)
class ShapeB:
    clarification: ClarificationResponse


@dataclass(frozen=True)
class GenericRejected:
    """Placeholder locations or tag-like triggers."""


@dataclass(frozen=True)
class InvalidOutput:
    cause: str


GenerationOutput = Union[ShapeA, ShapeB, GenericRejected, InvalidOutput]


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for item in items:
        key = item.lower()
        if key in seen:
            continue
        seen.add(key)
        out.append(item)
    return out


def read_locations(value: Any) -> List[LocationOption]:
    """Accepts ``{value, label}`` objects or bare labels; a missing value is slugified from the label."""
    if not isinstance(value, list):
        return []
    out: List[LocationOption] = []
    seen = set()
    for item in value:
        if isinstance(item, dict):
            label = bounded_text(item.get("label"), LABEL_CHARS)
            slug = slugify(as_text(item.get("value"))) or slugify(label)
        else:
            label = bounded_text(item, LABEL_CHARS)
            slug = slugify(label)
        if not label or not slug or slug in seen:
            continue
        seen.add(slug)
        out.append(LocationOption(value=slug, label=label))
    return out[:MAX_LOCATIONS]


def read_text_list(value: Any, max_items: int, max_chars: int = LABEL_CHARS) -> List[str]:
    if not isinstance(value, list):
        return []
    items = [bounded_text(item, max_chars) for item in value]
    return _dedupe([item for item in items if item])[:max_items]


def read_hashtags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    tags = ["".join(as_text(item).lstrip("#").split()) for item in value]
    return _dedupe([tag[:40] for tag in tags if tag])[:MAX_HASHTAGS]


def raw_labels(value: Any, key: Optional[str] = None) -> List[str]:
    if not isinstance(value, list):
        return []
    return [as_text(item.get(key)) if key and isinstance(item, dict) else as_text(item) for item in value]


def looks_generic(raw: Dict[str, Any]) -> bool:
    """Missing or non-list locations and triggers read as empty, which is generic."""
    return locations_look_generic(raw_labels(raw.get("locations"), "label")) or triggers_look_generic(
        raw_labels(raw.get("triggers"))
    )


def read_config(raw: Dict[str, Any], name: str) -> Union[GeneratedTrackerConfig, InvalidOutput]:
    missing = [key for key in REQUIRED_CONFIG_FIELDS if key not in raw]
    if missing:
        return InvalidOutput(cause=f"missing_field:{missing[0]}")

    defaults = get_generic_config(name)
    values: Dict[str, Any] = {}
    for key, attr in _REQUIRED_TEXT_FIELDS.items():
        text = bounded_text(raw.get(key), LABEL_CHARS)
        if not text:
            return InvalidOutput(cause=f"empty_field:{key}")
        values[attr] = text
    for key, attr in _OPTIONAL_TEXT_FIELDS.items():
        values[attr] = bounded_text(raw.get(key), TEXT_CHARS) or getattr(defaults, attr)

    scale = as_text(raw.get("intensityScale")).lower()
    values["intensity_scale"] = scale if scale in INTENSITY_SCALES else "neutral"

    if not isinstance(raw.get("locations"), list) or not isinstance(raw.get("triggers"), list):
        return InvalidOutput(cause="locations_or_triggers_not_a_list")
    values["locations"] = read_locations(raw.get("locations"))
    values["triggers"] = read_text_list(raw.get("triggers"), MAX_TRIGGERS)

    bullets = read_text_list(raw.get("emptyStateBullets"), EMPTY_STATE_BULLETS, TEXT_CHARS)
    for fallback in defaults.empty_state_bullets:
        if len(bullets) >= EMPTY_STATE_BULLETS:
            break
        if fallback not in bullets:
            bullets.append(fallback)
    values["empty_state_bullets"] = bullets
    values["suggested_hashtags"] = read_hashtags(raw.get("suggestedHashtags"))
    return GeneratedTrackerConfig(**values)


def read_clarification(data: Dict[str, Any], name: str, *, conversational: bool) -> ClarificationResponse:
    questions = read_text_list(data.get("questions"), 3, QUESTION_CHARS)
    if not questions:
        questions = clarification_questions(name, conversational=conversational)
    if conversational:
        questions = questions[:1]
    return ClarificationResponse(
        confidence=as_confidence(data.get("confidence")) or 0.0,
        final_question=bool(as_bool(data.get("final_question"))),
        questions=questions,
        reason=bounded_text(data.get("reason"), TEXT_CHARS) or DEFAULT_CLARIFICATION_REASON,
    )


def parse_generation_output(text: str, name: str, *, conversational: bool = False) -> GenerationOutput:
    """Decode model text into a tagged generation result; never raises."""
    try:
        data = parse_llm_object(text)
    except LLMOutputError as exc:
        return InvalidOutput(cause=exc.cause)

    if as_bool(data.get("needs_clarification")) is True:
        return ShapeB(read_clarification(data, name, conversational=conversational))

    raw_config = data.get("config") if isinstance(data.get("config"), dict) else data
    if looks_generic(raw_config):
        return GenericRejected()
    config = read_config(raw_config, name)
    if isinstance(config, InvalidOutput):
        return config
    return ShapeA(config=config, confidence=as_confidence(data.get("confidence")))


__all__ = [
    "REQUIRED_CONFIG_FIELDS",
    "ShapeA",
    "ShapeB",
    "GenericRejected",
    "InvalidOutput",
    "GenerationOutput",
    "looks_generic",
    "read_config",
    "read_clarification",
    "read_locations",
    "read_hashtags",
    "parse_generation_output",
]
