"""
Tracker config generation.

One call is one turn of a possibly multi-turn session. The caller carries
the session (selected interpretation, description, answered questions); this
service keeps nothing between calls.

Outcome is either a ``GeneratedTrackerConfig`` or a ``ClarificationResponse``.
A config is only returned when the model reports enough confidence and the
result is not generic; everything else becomes a clarification request.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Union

from tracker_backend.app.config.redaction import safe_error_detail
from tracker_backend.app.context.gatherer import ContextGatherer, sanitize_context
from tracker_backend.app.errors import MalformedUpstreamOutput, UpstreamUnavailable
from tracker_backend.app.observability.logging import structured_log
from tracker_backend.app.providers.base import LLMProvider, LLMProviderError, user_prompt
from tracker_backend.app.schemas import ClarificationResponse, GeneratedTrackerConfig

from .generic import clarification_questions, generic_rejection, is_generic_config
from .parsing import GenericRejected, InvalidOutput, ShapeB, parse_generation_output
from .prompts import CONFIDENCE_THRESHOLD, GenerationInput, build_generation_prompt, confidence_boost

logger = logging.getLogger(__name__)

GENERATION_TEMPERATURE = 0.5
GENERATION_MAX_TOKENS = 2048
NO_CONTEXT_REASON = "No definition or description was found for this name."
LOW_CONFIDENCE_REASON = "Not confident enough to build a specific tracker yet."

GenerationOutcome = Union[GeneratedTrackerConfig, ClarificationResponse]


def ask_for_context(inp: GenerationInput, reason: str, confidence: Optional[float] = None) -> ClarificationResponse:
    boost = confidence_boost(inp.answered)
    return ClarificationResponse(
        confidence=round(confidence if confidence is not None else 0.3 + boost, 2),
        final_question=inp.answered >= 2,
        questions=clarification_questions(inp.name, conversational=inp.conversational),
        reason=reason,
    )


class ConfigGenerationService:
    def __init__(
        self,
        provider: LLMProvider,
        *,
        model: str,
        gatherer: Optional[ContextGatherer] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.gatherer = gatherer

    async def _with_context(self, inp: GenerationInput) -> GenerationInput:
        context = inp.context
        if self.gatherer is not None:
            context = await self.gatherer.gather(inp.name, context)
        return replace(inp, context=sanitize_context(context))

    async def generate(self, inp: GenerationInput) -> GenerationOutcome:
        """
        Run one generation turn.

        Raises:
            UpstreamUnavailable: The model provider could not be reached or refused
            MalformedUpstreamOutput: The model answer could not be read as Shape A or B
        """
        inp = await self._with_context(inp)

        if not inp.context.has_dictionary_hit and not inp.has_user_context():
            structured_log({"event": "generation_short_circuit", "cause": "no_context"})
            return ask_for_context(inp, NO_CONTEXT_REASON)

        request = user_prompt(
            build_generation_prompt(inp),
            self.model,
            temperature=GENERATION_TEMPERATURE,
            max_tokens=GENERATION_MAX_TOKENS,
        )
        try:
            response = await self.provider.chat_completion(request)
        except LLMProviderError as exc:
            structured_log(
                {"event": "generation_provider_failed", "provider": exc.provider, "error": safe_error_detail(exc)},
                level=logging.WARNING,
            )
            raise UpstreamUnavailable(f"provider_error:{exc.provider}") from exc

        output = parse_generation_output(response.text, inp.name, conversational=inp.conversational)
        if isinstance(output, InvalidOutput):
            structured_log({"event": "generation_output_invalid", "cause": output.cause}, level=logging.WARNING)
            raise MalformedUpstreamOutput(output.cause)
        if isinstance(output, ShapeB):
            structured_log({"event": "generation_clarification", "answered": inp.answered})
            return output.clarification
        if isinstance(output, GenericRejected):
            structured_log({"event": "generation_generic_rejected", "answered": inp.answered})
            return generic_rejection(inp.name, inp.answered, confidence_boost(inp.answered))

        if output.confidence is not None and output.confidence < CONFIDENCE_THRESHOLD:
            structured_log({"event": "generation_low_confidence", "confidence": output.confidence})
            return ask_for_context(inp, LOW_CONFIDENCE_REASON, confidence=output.confidence)

        # deduping can shrink the lists below the raw check
        if is_generic_config(output.config):
            structured_log({"event": "generation_generic_rejected", "answered": inp.answered})
            return generic_rejection(inp.name, inp.answered, confidence_boost(inp.answered))

        structured_log(
            {
                "event": "generation_config_ready",
                "locations": len(output.config.locations),
                "triggers": len(output.config.triggers),
            }
        )
        return output.config


__all__ = ["ConfigGenerationService", "GenerationOutcome", "ask_for_context"]
