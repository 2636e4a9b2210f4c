import asyncio
import json

import httpx
import pytest

from tracker_backend.app.providers.base import LLMRequest, user_prompt
from tracker_backend.app.providers.errors import (
    ProviderEmptyResponseError,
    ProviderMisconfiguredError,
    ProviderTimeoutError,
    ProviderUpstreamError,
)
from tracker_backend.app.providers.factory import create_provider
from tracker_backend.app.providers.gemini_provider import GeminiProvider
from tracker_backend.app.providers.openai_provider import OpenAIProvider
from tracker_backend.tests._fakes import make_settings

GEMINI_OK = {
    "candidates": [{"content": {"parts": [{"text": '{"isAmbiguous": false}'}]}, "finishReason": "STOP"}],
    "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5},
}


def _call(provider_cls, handler, request):
    seen = []

    def record(r):
        seen.append(r)
        return handler(r)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(record)) as client:
            provider = provider_cls(api_key="secret-key", client=client)
            return await provider.chat_completion(request)

    return asyncio.run(run()), seen


class TestGemini:
    def test_payload_and_headers(self):
        request = LLMRequest(
            messages=[{"role": "system", "content": "be terse"}, {"role": "user", "content": "hi"}],
            model="gemini-2.5-flash",
            temperature=0.3,
            max_tokens=1024,
        )
        response, seen = _call(GeminiProvider, lambda r: httpx.Response(200, json=GEMINI_OK), request)
        sent = seen[0]
        assert sent.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"
        assert sent.headers["x-goog-api-key"] == "secret-key"
        assert "key=" not in str(sent.url)
        body = json.loads(sent.content)
        assert body["systemInstruction"] == {"parts": [{"text": "be terse"}]}
        assert body["contents"] == [{"role": "user", "parts": [{"text": "hi"}]}]
        assert body["generationConfig"]["temperature"] == 0.3
        assert body["generationConfig"]["maxOutputTokens"] == 1024
        assert body["generationConfig"]["thinkingConfig"] == {"thinkingBudget": 0}
        assert response.text == '{"isAmbiguous": false}'
        assert response.finish_reason == "STOP"
        assert response.usage["promptTokenCount"] == 10

    def test_http_error_maps_to_upstream(self):
        with pytest.raises(ProviderUpstreamError) as exc_info:
            _call(GeminiProvider, lambda r: httpx.Response(429, json={}), user_prompt("x", "m", temperature=0, max_tokens=1))
        assert exc_info.value.status_code == 429
        assert "secret-key" not in str(exc_info.value)

    def test_timeout_maps_to_timeout(self):
        def slow(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(ProviderTimeoutError):
            _call(GeminiProvider, slow, user_prompt("x", "m", temperature=0, max_tokens=1))

    def test_missing_candidates_is_empty_response(self):
        with pytest.raises(ProviderEmptyResponseError):
            _call(
                GeminiProvider,
                lambda r: httpx.Response(200, json={"candidates": []}),
                user_prompt("x", "m", temperature=0, max_tokens=1),
            )


class TestOpenAI:
    def test_chat_completion(self):
        payload = {"choices": [{"message": {"content": "ok"}, "finish_reason": "stop"}], "usage": {"total_tokens": 3}}
        response, seen = _call(
            OpenAIProvider,
            lambda r: httpx.Response(200, json=payload),
            user_prompt("hi", "gpt-4o-mini", temperature=0.5, max_tokens=10),
        )
        assert response.text == "ok"
        assert seen[0].headers["authorization"] == "Bearer secret-key"
        body = json.loads(seen[0].content)
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"] == [{"role": "user", "content": "hi"}]

    def test_empty_choices(self):
        with pytest.raises(ProviderEmptyResponseError):
            _call(
                OpenAIProvider,
                lambda r: httpx.Response(200, json={"choices": []}),
                user_prompt("hi", "m", temperature=0.5, max_tokens=10),
            )


class TestFactory:
    def test_gemini_is_default(self):
        assert isinstance(create_provider(make_settings()), GeminiProvider)

    def test_openai(self):
        provider = create_provider(make_settings(llm_provider="openai", llm_base_url="https://llm.example/v1/chat"))
        assert isinstance(provider, OpenAIProvider)

    def test_missing_key(self):
        with pytest.raises(ProviderMisconfiguredError):
            create_provider(make_settings(llm_api_key=None))

    def test_unknown_provider(self):
        with pytest.raises(ProviderMisconfiguredError):
            create_provider(make_settings(llm_provider="carrier-pigeon"))
