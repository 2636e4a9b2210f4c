"""Google Gemini ``generateContent`` provider."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx

from .base import LLMProvider, LLMRequest, LLMResponse
from .errors import ProviderEmptyResponseError, ProviderTimeoutError, ProviderUpstreamError

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def _to_contents(messages: List[Dict[str, str]]) -> tuple[Optional[Dict[str, Any]], List[Dict[str, Any]]]:
    """Split chat messages into Gemini's systemInstruction and contents."""
    system_parts: List[Dict[str, str]] = []
    contents: List[Dict[str, Any]] = []
    for message in messages:
        role = message.get("role", "user")
        text = message.get("content", "")
        if role == "system":
            system_parts.append({"text": text})
            continue
        contents.append({"role": "model" if role == "assistant" else "user", "parts": [{"text": text}]})
    system = {"parts": system_parts} if system_parts else None
    return system, contents


class GeminiProvider(LLMProvider):
    """
    Gemini REST provider.

    The API key is sent in the ``x-goog-api-key`` header rather than the
    query string so it never ends up in URLs that transport errors echo.
    Thinking is disabled (budget 0): both callers want short, deterministic
    JSON answers.
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self._client = client

    def endpoint(self, model: str) -> str:
        return f"{self.base_url}/models/{model}:generateContent"

    def build_payload(self, request: LLMRequest) -> Dict[str, Any]:
        system, contents = _to_contents(request.messages)
        generation_config: Dict[str, Any] = {
            "temperature": request.temperature,
            "thinkingConfig": {"thinkingBudget": 0},
        }
        if request.max_tokens:
            generation_config["maxOutputTokens"] = request.max_tokens
        payload: Dict[str, Any] = {"contents": contents, "generationConfig": generation_config}
        if system:
            payload["systemInstruction"] = system
        if request.extra_params:
            payload.update(request.extra_params)
        return payload

    async def _post(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        timeout = httpx.Timeout(self.timeout_seconds, connect=self.connect_timeout_seconds)
        if self._client is not None:
            return await self._client.post(url, headers=headers, json=payload, timeout=timeout)
        async with httpx.AsyncClient() as client:
            return await client.post(url, headers=headers, json=payload, timeout=timeout)

    async def chat_completion(self, request: LLMRequest) -> LLMResponse:
        try:
            resp = await self._post(self.endpoint(request.model), self.build_payload(request))
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError("Gemini request timeout", provider=self.name, original_error=exc) from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderUpstreamError(
                f"Gemini HTTP status {exc.response.status_code}",
                provider=self.name,
                original_error=exc,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUpstreamError(
                f"Gemini HTTP error: {type(exc).__name__}",
                provider=self.name,
                original_error=exc,
            ) from exc
        except json.JSONDecodeError as exc:
            raise ProviderUpstreamError("Gemini returned invalid JSON", provider=self.name, original_error=exc) from exc

        try:
            candidate = data["candidates"][0]
            text = candidate["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderEmptyResponseError(
                "Gemini response carried no candidate text",
                provider=self.name,
                original_error=exc,
            ) from exc
        if not text:
            raise ProviderEmptyResponseError("Gemini returned empty text", provider=self.name)

        return LLMResponse(
            text=text,
            usage=data.get("usageMetadata"),
            raw=data,
            finish_reason=candidate.get("finishReason"),
        )


__all__ = ["DEFAULT_BASE_URL", "GeminiProvider"]
