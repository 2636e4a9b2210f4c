from .base import LLMProvider, LLMProviderError, LLMRequest, LLMResponse, user_prompt
from .errors import (
    ProviderEmptyResponseError,
    ProviderMisconfiguredError,
    ProviderTimeoutError,
    ProviderUpstreamError,
)
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider
from .factory import create_provider

__all__ = [
    "LLMProvider",
    "LLMProviderError",
    "LLMRequest",
    "LLMResponse",
    "user_prompt",
    "ProviderEmptyResponseError",
    "ProviderMisconfiguredError",
    "ProviderTimeoutError",
    "ProviderUpstreamError",
    "GeminiProvider",
    "OpenAIProvider",
    "create_provider",
]
