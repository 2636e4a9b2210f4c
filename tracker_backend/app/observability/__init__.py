from __future__ import annotations

from .logging import LOGGING_CONFIG, hash_subject, safe_redact, structured_log

__all__ = ["LOGGING_CONFIG", "hash_subject", "safe_redact", "structured_log"]
