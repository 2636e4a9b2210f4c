from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_CONVERSATION_TURNS = 6


class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Interpretation(CamelModel):
    value: str
    label: str
    description: str


class AmbiguityCheckResult(CamelModel):
    is_ambiguous: bool
    reason: str
    interpretations: List[Interpretation] = Field(default_factory=list)
    suggested_correction: Optional[str] = None


class LocationOption(CamelModel):
    value: str
    label: str


class GeneratedTrackerConfig(CamelModel):
    intensity_label: str
    intensity_min_label: str
    intensity_max_label: str
    intensity_scale: Literal["low_bad", "high_bad", "neutral"]
    location_label: str
    location_placeholder: str
    triggers_label: str
    notes_label: str
    notes_placeholder: str
    add_button_label: str
    form_title: str
    empty_state_title: str
    empty_state_description: str
    empty_state_bullets: List[str]
    entry_title: str
    delete_confirm_message: str
    locations: List[LocationOption]
    triggers: List[str]
    suggested_hashtags: List[str]


class ConversationHistoryEntry(BaseModel):
    question: str
    answer: str


class ClarificationResponse(BaseModel):
    """Shape B: the generator needs more input before it can produce a config."""

    needs_clarification: Literal[True] = True
    confidence: float
    final_question: bool
    questions: List[str] = Field(min_length=1, max_length=3)
    reason: str


class CheckAmbiguityRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    tracker_name: str
    all_definitions: List[str] = Field(default_factory=list)
    wiki_summary: Optional[str] = None
    wiki_categories: List[str] = Field(default_factory=list)
    related_terms: List[str] = Field(default_factory=list)

    @field_validator("tracker_name")
    @classmethod
    def require_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("trackerName is required")
        return v


class GenerateTrackerConfigRequest(CheckAmbiguityRequest):
    definition: Optional[str] = None
    user_description: Optional[str] = None
    selected_interpretation: Optional[str] = None
    conversation_history: List[ConversationHistoryEntry] = Field(default_factory=list)


__all__ = [
    "MAX_CONVERSATION_TURNS",
    "CamelModel",
    "Interpretation",
    "AmbiguityCheckResult",
    "LocationOption",
    "GeneratedTrackerConfig",
    "ConversationHistoryEntry",
    "ClarificationResponse",
    "CheckAmbiguityRequest",
    "GenerateTrackerConfigRequest",
]
