"""
Model output handling shared by the classifier and the config generator.

Model text is untrusted. It is pre-processed (code fences stripped), decoded
into a plain JSON value, and only then read field by field by the caller.
Nothing here builds a typed record straight from the decoded JSON.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

_FENCED = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)
_EMBEDDED_FENCE = re.compile(r"```(?:json|JSON)?\s*\n(.*?)\n\s*```", re.DOTALL)


class LLMOutputError(ValueError):
    """Raised when model text cannot be decoded. ``cause`` is a short code safe to log."""

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause


def strip_code_fences(text: str) -> str:
    """Remove a markdown code fence wrapping the payload, if any."""
    stripped = (text or "").strip()
    match = _FENCED.match(stripped)
    if match:
        return match.group(1).strip()
    match = _EMBEDDED_FENCE.search(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_llm_json(text: str) -> Any:
    """
    Decode model text into a JSON value.

    Raises:
        LLMOutputError: ``empty_output`` or ``invalid_json``
    """
    body = strip_code_fences(text)
    if not body:
        raise LLMOutputError("empty_output")
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise LLMOutputError("invalid_json") from exc


def parse_llm_object(text: str) -> Dict[str, Any]:
    value = parse_llm_json(text)
    if not isinstance(value, dict):
        raise LLMOutputError("not_an_object")
    return value


def as_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def bounded_text(value: Any, max_chars: int) -> str:
    """``as_text`` with whitespace collapsed and a hard length cap."""
    return " ".join(as_text(value).split())[:max_chars].rstrip()


def as_text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    out: List[str] = []
    for item in value:
        text = as_text(item)
        if text:
            out.append(text)
    return out


def as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None


def as_confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if number != number:
        return None
    return min(1.0, max(0.0, number))


__all__ = [
    "LLMOutputError",
    "strip_code_fences",
    "parse_llm_json",
    "parse_llm_object",
    "as_text",
    "as_text_list",
    "bounded_text",
    "as_bool",
    "as_confidence",
]
