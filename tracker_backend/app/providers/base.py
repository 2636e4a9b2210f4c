"""LLM provider abstraction so the resolver and generator can switch between Gemini and OpenAI-style APIs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class LLMRequest:
    """Unified request format for all LLM providers."""
    messages: list[Dict[str, str]]
    model: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    extra_params: Optional[Dict[str, Any]] = None


@dataclass
class LLMResponse:
    """Unified response format from LLM providers."""
    text: str
    usage: Optional[Dict[str, int]] = None
    raw: Optional[Dict[str, Any]] = None
    finish_reason: Optional[str] = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    name = "abstract"

    @abstractmethod
    async def chat_completion(self, request: LLMRequest) -> LLMResponse:
        """
        Execute a single non-streaming completion.

        Args:
            request: Unified LLM request

        Returns:
            LLMResponse with text and metadata

        Raises:
            LLMProviderError: On transport, status or response-shape failures
        """


class LLMProviderError(Exception):
    """Base exception for LLM provider errors."""

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.provider = provider
        self.original_error = original_error


def user_prompt(prompt: str, model: str, *, temperature: float, max_tokens: int) -> LLMRequest:
    """Single-turn request carrying one user prompt."""
    return LLMRequest(
        messages=[{"role": "user", "content": prompt}],
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
    )


__all__ = ["LLMProvider", "LLMRequest", "LLMResponse", "LLMProviderError", "user_prompt"]
