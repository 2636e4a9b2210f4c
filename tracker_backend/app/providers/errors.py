from __future__ import annotations

from typing import Optional

from .base import LLMProviderError


class ProviderMisconfiguredError(Exception):
    """Raised when provider configuration is missing or invalid."""


class ProviderTimeoutError(LLMProviderError):
    """Raised when the provider call times out."""


class ProviderUpstreamError(LLMProviderError):
    """Raised for non-2xx answers and transport failures."""

    def __init__(
        self,
        message: str,
        provider: str,
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, provider, original_error)
        self.status_code = status_code


class ProviderEmptyResponseError(LLMProviderError):
    """Raised when the provider answers 2xx but carries no text."""


__all__ = [
    "ProviderMisconfiguredError",
    "ProviderTimeoutError",
    "ProviderUpstreamError",
    "ProviderEmptyResponseError",
]
