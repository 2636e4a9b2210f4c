from __future__ import annotations

from typing import List, Optional

from tracker_backend.app.context.gatherer import GatheredContext

MIN_INTERPRETATIONS = 4
MAX_INTERPRETATIONS = 8

_EXAMPLES = """Examples:
- "Flying" -> AMBIGUOUS (air travel vs fear of flying vs pilot training vs hang gliding)
- "Hockey" -> AMBIGUOUS (ice hockey vs field hockey - different sports, different metrics)
- "Curling" -> AMBIGUOUS (winter sport vs hair styling)
- "Reading" -> AMBIGUOUS (the hobby vs blood pressure/medical readings)
- "Running" -> NOT AMBIGUOUS (clearly the exercise activity)
- "Migraine" -> NOT AMBIGUOUS (clearly the headache condition)
- "Yoga" -> NOT AMBIGUOUS (clearly the practice)
- "Swimming" -> NOT AMBIGUOUS (clearly the exercise)
- "Stress" -> NOT AMBIGUOUS (clearly psychological/mental health)
- "Walking" -> NOT AMBIGUOUS (clearly the exercise)"""

_OUTPUT_SHAPE = """Return ONLY valid JSON (no markdown, no explanation):
{
  "isAmbiguous": boolean,
  "reason": "string - brief explanation of your decision",
  "interpretations": [
    {
      "value": "string - lowercase-hyphenated identifier (e.g., 'ice-hockey')",
      "label": "string - short display label (e.g., 'Ice Hockey')",
      "description": "string - one sentence explaining what would be tracked"
    }
  ]
}"""


def context_section(name: str, context: GatheredContext) -> str:
    """All values must already be sanitized."""
    lines: List[str] = []
    if context.all_definitions:
        lines.append("Dictionary definitions found:")
        lines.extend(f"{i}. {d}" for i, d in enumerate(context.all_definitions, start=1))
    elif context.definition:
        lines.append(f"Dictionary definition found: {context.definition}")
    else:
        lines.append(f'No dictionary definitions found. Use your knowledge of "{name}".')
    if context.wiki_summary:
        lines.append(f"Wikipedia summary: {context.wiki_summary}")
    if context.wiki_categories:
        lines.append(f"Wikipedia categories: {', '.join(context.wiki_categories)}")
    if context.related_terms:
        lines.append(f"Related terms: {', '.join(context.related_terms)}")
    return "\n".join(lines)


def build_ambiguity_prompt(name: str, context: GatheredContext, *, previous_count: Optional[int] = None) -> str:
    """
    Classifier prompt. ``previous_count`` switches to the diversity re-ask used
    when a first answer was ambiguous but too short.
    """
    retry = ""
    if previous_count is not None:
        retry = f"""
IMPORTANT: A previous answer marked this term ambiguous but listed only {previous_count} interpretation(s).
You MUST return between {MIN_INTERPRETATIONS} and {MAX_INTERPRETATIONS} DISTINCT interpretations.
Cover clearly different domains (for example a symptom or condition, an activity or exercise,
a habit or behavior, an intake, a measurement). Do not repeat or rephrase the same meaning.
"""
    return f"""You are helping a health/wellness tracking app determine if a tracker name is ambiguous.

The user wants to create a tracker called "{name}".

{context_section(name, context)}

TASK: Determine if "{name}" is ambiguous in the context of health/wellness/activity tracking.

A term is AMBIGUOUS if:
- It has multiple distinct interpretations that would result in DIFFERENT tracking setups
- The user's intent cannot be reasonably assumed
- Different people would track fundamentally different things with the same word

A term is NOT AMBIGUOUS if:
- It has one obvious primary meaning for tracking (e.g., "Running" -> exercise)
- Even with multiple definitions, one clearly dominates for health tracking (e.g., "Depression" -> mental health)
- The different meanings would result in essentially the same tracking setup

{_EXAMPLES}
{retry}
{_OUTPUT_SHAPE}

RULES:
- If NOT ambiguous: return empty interpretations array []
- If AMBIGUOUS: return {MIN_INTERPRETATIONS}-{MAX_INTERPRETATIONS} distinct interpretations for health/wellness tracking
- Order interpretations by likelihood (most common first)
- Focus on interpretations that make sense for a TRACKING app (things people would log regularly)"""


__all__ = ["MIN_INTERPRETATIONS", "MAX_INTERPRETATIONS", "context_section", "build_ambiguity_prompt"]
