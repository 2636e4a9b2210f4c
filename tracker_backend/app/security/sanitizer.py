"""
Prompt sanitization for text embedded in LLM prompts.

Every piece of user- or upstream-supplied text that reaches a prompt goes
through this module first.

Guarantees (hold for every input):
- The output never contains any of: " ' ` \\ < > { }
- len(output) <= max_length

Pattern detection is advisory. A match is replaced with a placeholder and
reported so the caller can emit a security event, but the structural
guarantee comes from character stripping, which runs before matching so that
bracket-delimited markers are already broken up.

Known gaps: Unicode homoglyphs (e.g. Cyrillic letters spelling "system:")
and zero-width characters inserted between letters evade the pattern pass.
They cannot break prompt structure, so they are left as-is.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple

BLOCKED_PLACEHOLDER = "[blocked]"
DEFAULT_MAX_LENGTH = 100
EXTERNAL_MAX_LENGTH = 500
WORD_BOUNDARY_RATIO = 0.7

_DANGEROUS_CHARS = re.compile(r"[\"'`\\<>{}]")
_NEWLINES = re.compile(r"[\n\r]")
_WHITESPACE = re.compile(r"\s+")
_HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n\r]+")


class InjectionKind(str, Enum):
    OVERRIDE_INSTRUCTIONS = "OVERRIDE_INSTRUCTIONS"
    ROLE_MARKER = "ROLE_MARKER"
    TEMPLATE_DELIMITER = "TEMPLATE_DELIMITER"


# Ordered; each pattern is applied to the output of the previous one.
INJECTION_PATTERNS: List[Tuple[InjectionKind, re.Pattern[str]]] = [
    (InjectionKind.OVERRIDE_INSTRUCTIONS, re.compile(r"ignore\s+(?:all\s+)?(?:previous|above|prior)", re.IGNORECASE)),
    (InjectionKind.OVERRIDE_INSTRUCTIONS, re.compile(r"forget\s+(?:all\s+)?(?:previous|above|prior)", re.IGNORECASE)),
    (InjectionKind.OVERRIDE_INSTRUCTIONS, re.compile(r"disregard\s+(?:all\s+)?(?:previous|above|prior)", re.IGNORECASE)),
    (InjectionKind.OVERRIDE_INSTRUCTIONS, re.compile(r"new\s+instruction", re.IGNORECASE)),
    (InjectionKind.ROLE_MARKER, re.compile(r"system\s*:", re.IGNORECASE)),
    (InjectionKind.ROLE_MARKER, re.compile(r"assistant\s*:", re.IGNORECASE)),
    (InjectionKind.ROLE_MARKER, re.compile(r"user\s*:", re.IGNORECASE)),
    (InjectionKind.TEMPLATE_DELIMITER, re.compile(r"\[INST\]", re.IGNORECASE)),
    (InjectionKind.TEMPLATE_DELIMITER, re.compile(r"\[/INST\]", re.IGNORECASE)),
    (InjectionKind.TEMPLATE_DELIMITER, re.compile(r"<<SYS>>", re.IGNORECASE)),
    (InjectionKind.TEMPLATE_DELIMITER, re.compile(r"<\|im_start\|>", re.IGNORECASE)),
    (InjectionKind.TEMPLATE_DELIMITER, re.compile(r"<\|im_end\|>", re.IGNORECASE)),
]


@dataclass(frozen=True)
class SanitizeResult:
    """Sanitized text plus what happened to it."""
    value: str
    injection_detected: bool
    was_truncated: bool
    original_length: int
    injection_kinds: Tuple[str, ...] = ()


def _strip_dangerous(text: str) -> str:
    return _DANGEROUS_CHARS.sub(" ", text)


def _truncate_at_boundary(text: str, max_length: int) -> str:
    """
    Cut text to max_length without ending mid-word when possible.

    If the cut falls inside a word, backtrack to the last space provided it
    lies within the last 30% of the budget; otherwise hard-cut.
    """
    if max_length <= 0:
        return ""
    cut = text[:max_length]
    at_boundary = cut.endswith(" ") or text[max_length:max_length + 1].isspace()
    if at_boundary:
        return cut.rstrip()
    last_space = cut.rfind(" ")
    if last_space > max_length * WORD_BOUNDARY_RATIO:
        return cut[:last_space].rstrip()
    return cut.rstrip()


def sanitize_for_prompt(
    text: str | None,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    allow_newlines: bool = False,
    check_injection: bool = True,
) -> SanitizeResult:
    """
    Sanitize user input for embedding in an LLM prompt.

    Steps, in order: strip structural characters, drop newlines (unless
    allowed), collapse whitespace, neutralize known injection phrasing,
    truncate at a word boundary.

    Args:
        text: Raw input (None is treated as empty)
        max_length: Upper bound on the output length
        allow_newlines: Keep line breaks instead of folding them into spaces
        check_injection: Run the injection pattern pass

    Returns:
        SanitizeResult
    """
    raw = text or ""
    max_length = max(0, int(max_length))
    value = _strip_dangerous(raw)

    if allow_newlines:
        value = _HORIZONTAL_WHITESPACE.sub(" ", value)
        value = "\n".join(line.strip() for line in value.splitlines()).strip()
    else:
        value = _NEWLINES.sub(" ", value)
        value = _WHITESPACE.sub(" ", value).strip()

    kinds: List[str] = []
    if check_injection:
        for kind, pattern in INJECTION_PATTERNS:
            if pattern.search(value):
                value = pattern.sub(BLOCKED_PLACEHOLDER, value)
                if kind.value not in kinds:
                    kinds.append(kind.value)

    was_truncated = len(value) > max_length
    if was_truncated:
        value = _truncate_at_boundary(value, max_length)

    return SanitizeResult(
        value=value,
        injection_detected=bool(kinds),
        was_truncated=was_truncated,
        original_length=len(raw),
        injection_kinds=tuple(kinds),
    )


def sanitize_array_for_prompt(
    items: Sequence[str] | None,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    allow_newlines: bool = False,
    check_injection: bool = True,
) -> List[SanitizeResult]:
    return [
        sanitize_for_prompt(
            item,
            max_length=max_length,
            allow_newlines=allow_newlines,
            check_injection=check_injection,
        )
        for item in (items or [])
    ]


def quick_sanitize(text: str | None, max_length: int = 50) -> str:
    return sanitize_for_prompt(text, max_length=max_length).value


def sanitize_external_response(text: str | None, max_length: int = EXTERNAL_MAX_LENGTH) -> str:
    """Character stripping and length bound only, for dictionary/wiki/related-term text."""
    value = _strip_dangerous(text or "")
    value = _WHITESPACE.sub(" ", value).strip()
    return value[: max(0, int(max_length))].rstrip()


__all__ = [
    "BLOCKED_PLACEHOLDER",
    "INJECTION_PATTERNS",
    "InjectionKind",
    "SanitizeResult",
    "sanitize_for_prompt",
    "sanitize_array_for_prompt",
    "quick_sanitize",
    "sanitize_external_response",
]
