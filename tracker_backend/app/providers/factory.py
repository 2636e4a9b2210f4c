"""LLM provider factory for creating providers from settings."""

from __future__ import annotations

from typing import Optional

import httpx

from tracker_backend.app.config.settings import Settings

from .base import LLMProvider
from .errors import ProviderMisconfiguredError
from .gemini_provider import DEFAULT_BASE_URL, GeminiProvider
from .openai_provider import OpenAIProvider


def create_provider(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> LLMProvider:
    """
    Create an LLM provider from settings.

    Settings used:
        LLM_PROVIDER: "gemini" or "openai" (default: "gemini")
        LLM_API_KEY / GEMINI_API_KEY: API key for the provider (required)
        LLM_BASE_URL: Base URL override (optional)
        LLM_TIMEOUT_SECONDS / LLM_CONNECT_TIMEOUT_SECONDS

    Raises:
        ProviderMisconfiguredError: If the key is missing or the provider is unknown
    """
    if not settings.llm_api_key:
        raise ProviderMisconfiguredError("LLM_API_KEY is required")

    provider_type = settings.llm_provider or "gemini"
    if provider_type == "gemini":
        return GeminiProvider(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url or DEFAULT_BASE_URL,
            timeout_seconds=settings.llm_timeout_seconds,
            connect_timeout_seconds=settings.llm_connect_timeout_seconds,
            client=client,
        )
    if provider_type == "openai":
        if settings.llm_base_url:
            return OpenAIProvider(
                api_key=settings.llm_api_key,
                base_url=settings.llm_base_url,
                timeout_seconds=settings.llm_timeout_seconds,
                connect_timeout_seconds=settings.llm_connect_timeout_seconds,
                client=client,
            )
        return OpenAIProvider(
            api_key=settings.llm_api_key,
            timeout_seconds=settings.llm_timeout_seconds,
            connect_timeout_seconds=settings.llm_connect_timeout_seconds,
            client=client,
        )
    raise ProviderMisconfiguredError(f"Unknown LLM_PROVIDER: {provider_type}. Must be 'gemini' or 'openai'")


__all__ = ["create_provider"]
