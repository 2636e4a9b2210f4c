from __future__ import annotations

import hashlib
import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

_OBS_SALT = (os.getenv("OBS_HASH_SALT") or "obs-salt").encode("utf-8")

# Raw user text never goes to the application log.
_USER_TEXT_KEYS = (
    "trackerName",
    "tracker_name",
    "userDescription",
    "user_description",
    "answer",
    "conversationHistory",
    "prompt",
    "payload",
    "body",
)

LOGGING_CONFIG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        }
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
}


def hash_subject(user_id: str | None) -> str:
    h = hashlib.sha256()
    h.update(_OBS_SALT)
    h.update(f"user:{user_id or 'anon'}".encode("utf-8"))
    return h.hexdigest()[:16]


def safe_redact(event: Dict[str, Any]) -> Dict[str, Any]:
    redacted = dict(event) if isinstance(event, dict) else {}
    for key in _USER_TEXT_KEYS:
        redacted.pop(key, None)
    return redacted


def structured_log(event: Dict[str, Any], level: int = logging.INFO) -> None:
    try:
        safe_event = safe_redact(event)
        logger.log(level, json.dumps(safe_event, separators=(",", ":"), default=str))
    except Exception:
        # logging must never break the request path
        return


__all__ = ["LOGGING_CONFIG", "hash_subject", "structured_log", "safe_redact"]
