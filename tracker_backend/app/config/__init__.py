from .settings import (
    DEV_ORIGINS,
    Settings,
    get_settings,
    settings_public_summary,
)
from .redaction import redact_secrets, safe_error_detail

__all__ = [
    "DEV_ORIGINS",
    "Settings",
    "get_settings",
    "settings_public_summary",
    "redact_secrets",
    "safe_error_detail",
]
