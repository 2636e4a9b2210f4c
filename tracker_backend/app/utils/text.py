from __future__ import annotations

import re

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase, hyphen-separated identifier; empty when nothing usable remains."""
    return _NON_SLUG.sub("-", (text or "").lower()).strip("-")


def normalize_term(text: str) -> str:
    return " ".join((text or "").split()).lower()


__all__ = ["slugify", "normalize_term"]
