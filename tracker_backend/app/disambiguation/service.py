"""
Ambiguity check orchestration.

Order: curated local terms, then context gathering, then the model
classifier. The classifier is fail-open: if it cannot be reached or its
answer cannot be read, the name is reported as not ambiguous so tracker
creation is never blocked on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tracker_backend.app.config.redaction import safe_error_detail
from tracker_backend.app.context.gatherer import ContextGatherer, GatheredContext, sanitize_context
from tracker_backend.app.llm_output import LLMOutputError, as_bool, as_text, bounded_text, parse_llm_object
from tracker_backend.app.observability.logging import structured_log
from tracker_backend.app.providers.base import LLMProvider, LLMProviderError, user_prompt
from tracker_backend.app.schemas import AmbiguityCheckResult, Interpretation
from tracker_backend.app.security.sanitizer import sanitize_for_prompt
from tracker_backend.app.utils.text import slugify

from .prompts import MAX_INTERPRETATIONS, MIN_INTERPRETATIONS, build_ambiguity_prompt
from .resolver import get_local_ambiguity_fallback, not_ambiguous

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 2
CLASSIFIER_TEMPERATURE = 0.3
CLASSIFIER_MAX_TOKENS = 1024
LABEL_CHARS = 80
DESCRIPTION_CHARS = 300

# (category slug, label suffix, description template)
FALLBACK_TEMPLATES = (
    ("symptom", "symptom or condition", "Track {name} as a symptom or health condition: severity, duration and triggers."),
    ("activity", "activity or exercise", "Track {name} as an activity or exercise: sessions, duration and effort."),
    ("habit", "habit or behavior", "Track {name} as a habit or behavior: frequency, urges and context."),
    ("nutrition", "nutrition or intake", "Track {name} as something you consume: amounts, timing and effects."),
    ("measurement", "measurement or reading", "Track {name} as a measurement or reading: values over time."),
    ("device", "device or object", "Track {name} as a device or object you use: usage and issues."),
)


@dataclass
class ClassifierVerdict:
    is_ambiguous: bool
    reason: str
    interpretations: List[Interpretation] = field(default_factory=list)


def normalize_interpretation(item: Any) -> Optional[Interpretation]:
    """Valid only if value, label and description are all non-empty after trim."""
    if not isinstance(item, dict):
        return None
    raw_value = as_text(item.get("value"))
    label = bounded_text(item.get("label"), LABEL_CHARS)
    description = bounded_text(item.get("description"), DESCRIPTION_CHARS)
    value = slugify(raw_value)
    if not raw_value or not value or not label or not description:
        return None
    return Interpretation(value=value, label=label, description=description)


def merge_interpretations(existing: List[Interpretation], incoming: List[Interpretation]) -> List[Interpretation]:
    """Append ``incoming`` to ``existing``, dropping slugs already present."""
    seen = {i.value.lower() for i in existing}
    merged = list(existing)
    for interpretation in incoming:
        key = interpretation.value.lower()
        if key in seen:
            continue
        seen.add(key)
        merged.append(interpretation)
    return merged


def fallback_interpretations(name: str) -> List[Interpretation]:
    display = " ".join((name or "").split()) or "This"
    base = slugify(name)
    out: List[Interpretation] = []
    for category, suffix, description in FALLBACK_TEMPLATES:
        out.append(
            Interpretation(
                value=f"{base}-{category}" if base else category,
                label=f"{display} ({suffix})",
                description=description.format(name=display.lower()),
            )
        )
    return out


def fill_interpretation_band(name: str, interpretations: List[Interpretation]) -> List[Interpretation]:
    """Pad to the minimum from the fallback templates and cap at the maximum."""
    result = list(interpretations)
    if len(result) < MIN_INTERPRETATIONS:
        for candidate in fallback_interpretations(name):
            if len(result) >= MIN_INTERPRETATIONS:
                break
            result = merge_interpretations(result, [candidate])
    return result[:MAX_INTERPRETATIONS]


def parse_ambiguity_output(text: str) -> ClassifierVerdict:
    """
    Read the classifier's JSON answer.

    Raises:
        LLMOutputError: If the text is not a JSON object or ``isAmbiguous``
            is missing or not a boolean
    """
    data: Dict[str, Any] = parse_llm_object(text)
    is_ambiguous = as_bool(data.get("isAmbiguous"))
    if is_ambiguous is None:
        raise LLMOutputError("missing_is_ambiguous")
    reason = bounded_text(data.get("reason"), DESCRIPTION_CHARS)
    items = data.get("interpretations")
    interpretations: List[Interpretation] = []
    if is_ambiguous and isinstance(items, list):
        for item in items:
            interpretation = normalize_interpretation(item)
            if interpretation is not None:
                interpretations = merge_interpretations(interpretations, [interpretation])
    return ClassifierVerdict(is_ambiguous=is_ambiguous, reason=reason, interpretations=interpretations)


class DisambiguationService:
    def __init__(
        self,
        provider: LLMProvider,
        *,
        model: str,
        gatherer: Optional[ContextGatherer] = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        self.provider = provider
        self.model = model
        self.gatherer = gatherer
        self.max_attempts = max(1, max_attempts)

    async def _gather(self, name: str, supplied: Optional[GatheredContext]) -> GatheredContext:
        context = supplied or GatheredContext()
        if self.gatherer is not None:
            context = await self.gatherer.gather(name, context)
        return sanitize_context(context)

    async def _classify(self, name: str, context: GatheredContext, previous_count: Optional[int]) -> ClassifierVerdict:
        prompt = build_ambiguity_prompt(name, context, previous_count=previous_count)
        response = await self.provider.chat_completion(
            user_prompt(
                prompt,
                self.model,
                temperature=CLASSIFIER_TEMPERATURE,
                max_tokens=CLASSIFIER_MAX_TOKENS,
            )
        )
        return parse_ambiguity_output(response.text)

    async def check(self, name: str, supplied: Optional[GatheredContext] = None) -> AmbiguityCheckResult:
        local = get_local_ambiguity_fallback(name)
        if local.is_ambiguous or not name.strip():
            return local

        safe_name = sanitize_for_prompt(name).value
        context = await self._gather(safe_name, supplied)

        collected: List[Interpretation] = []
        reason = ""
        for attempt in range(1, self.max_attempts + 1):
            previous = len(collected) if attempt > 1 else None
            try:
                verdict = await self._classify(safe_name, context, previous)
            except (LLMProviderError, LLMOutputError) as exc:
                cause = exc.cause if isinstance(exc, LLMOutputError) else "classifier_unavailable"
                structured_log(
                    {
                        "event": "ambiguity_classifier_failed",
                        "attempt": attempt,
                        "cause": cause,
                        "error": safe_error_detail(exc),
                    },
                    level=logging.WARNING,
                )
                if attempt == 1:
                    return not_ambiguous(cause)
                # the first answer already said ambiguous; keep it and pad
                break

            if not verdict.is_ambiguous:
                if attempt == 1:
                    return not_ambiguous(verdict.reason or "Not ambiguous.")
                break

            reason = verdict.reason or reason
            collected = merge_interpretations(collected, verdict.interpretations)
            if len(collected) >= MIN_INTERPRETATIONS or not collected:
                break

        interpretations = fill_interpretation_band(safe_name, collected)
        structured_log(
            {
                "event": "ambiguity_classified",
                "model_interpretations": len(collected),
                "returned": len(interpretations),
            }
        )
        return AmbiguityCheckResult(
            is_ambiguous=True,
            reason=reason or "This name can mean several different things to track.",
            interpretations=interpretations,
        )


__all__ = [
    "FALLBACK_TEMPLATES",
    "MAX_ATTEMPTS",
    "ClassifierVerdict",
    "DisambiguationService",
    "fallback_interpretations",
    "fill_interpretation_band",
    "merge_interpretations",
    "normalize_interpretation",
    "parse_ambiguity_output",
]
