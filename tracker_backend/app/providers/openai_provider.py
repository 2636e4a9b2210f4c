"""OpenAI-compatible chat completions provider."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx

from .base import LLMProvider, LLMRequest, LLMResponse
from .errors import ProviderEmptyResponseError, ProviderTimeoutError, ProviderUpstreamError


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1/chat/completions",
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self._client = client

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        timeout = httpx.Timeout(self.timeout_seconds, connect=self.connect_timeout_seconds)
        if self._client is not None:
            return await self._client.post(self.base_url, headers=headers, json=payload, timeout=timeout)
        async with httpx.AsyncClient() as client:
            return await client.post(self.base_url, headers=headers, json=payload, timeout=timeout)

    async def chat_completion(self, request: LLMRequest) -> LLMResponse:
        """Execute OpenAI chat completion."""
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": request.messages,
            "temperature": request.temperature,
        }
        if request.max_tokens:
            payload["max_tokens"] = request.max_tokens
        if request.extra_params:
            payload.update(request.extra_params)

        try:
            resp = await self._post(payload)
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError("OpenAI request timeout", provider=self.name, original_error=exc) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderUpstreamError(
                f"OpenAI HTTP status {exc.response.status_code}",
                provider=self.name,
                original_error=exc,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUpstreamError(
                f"OpenAI HTTP error: {type(exc).__name__}",
                provider=self.name,
                original_error=exc,
            ) from exc
        except json.JSONDecodeError as exc:
            raise ProviderUpstreamError("OpenAI returned invalid JSON", provider=self.name, original_error=exc) from exc

        try:
            choice = data["choices"][0]
            text = choice["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderEmptyResponseError(
                f"OpenAI response missing expected fields: {exc}",
                provider=self.name,
                original_error=exc,
            ) from exc
        if not text:
            raise ProviderEmptyResponseError("OpenAI returned empty content", provider=self.name)

        return LLMResponse(
            text=text,
            usage=data.get("usage"),
            raw=data,
            finish_reason=choice.get("finish_reason"),
        )


__all__ = ["OpenAIProvider"]
