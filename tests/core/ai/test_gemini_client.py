"""Tests for the Gemini client."""

import json

import httpx
import pytest

from forexa.core.ai import GeminiClient, GenerativeModel
from forexa.core.exceptions import ErrorCode, ModelInvocationError


def _reply(text: str, finish_reason: str = "STOP") -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": finish_reason}]}


def _client(handler, metrics, **kwargs) -> GeminiClient:
    return GeminiClient("google-key", transport=httpx.MockTransport(handler), metrics=metrics, **kwargs)


class TestGeminiRequest:
    @pytest.mark.asyncio
    async def test_generate_posts_prompt_with_header_key(self, metrics, registry):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_reply('{"prediction": "BUY"}'))

        client = _client(handler, metrics, model_id="gemini-test", temperature=0.2, max_output_tokens=512)
        text = await client.generate("analyze EUR/USD")
        await client.close()

        assert text == '{"prediction": "BUY"}'
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/v1beta/models/gemini-test:generateContent"
        assert request.headers["x-goog-api-key"] == "google-key"
        assert "google-key" not in str(request.url)
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"] == "analyze EUR/USD"
        assert body["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 512}
        assert registry.get_sample_value("forexa_model_invocations_total", {"outcome": "success"}) == 1.0

    @pytest.mark.asyncio
    async def test_joins_multiple_parts(self, metrics):
        reply = {"candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "world"}]}}]}

        client = _client(lambda request: httpx.Response(200, json=reply), metrics)

        assert await client.generate("hi") == "Hello world"

    def test_satisfies_model_protocol(self, metrics):
        client = _client(lambda request: httpx.Response(200), metrics)

        assert isinstance(client, GenerativeModel)
        assert "google-key" not in repr(client)


class TestGeminiFailures:
    @pytest.mark.asyncio
    async def test_http_error_status(self, metrics, registry):
        body = {"error": {"code": 429, "message": "Resource has been exhausted"}}
        client = _client(lambda request: httpx.Response(429, json=body), metrics, model_id="gemini-test")

        with pytest.raises(ModelInvocationError, match="Resource has been exhausted") as exc_info:
            await client.generate("hi")

        assert exc_info.value.error_code == ErrorCode.MODEL_INVOCATION_ERROR
        assert exc_info.value.details["status_code"] == 429
        assert exc_info.value.model_id == "gemini-test"
        assert registry.get_sample_value("forexa_model_invocations_total", {"outcome": "failure"}) == 1.0

    @pytest.mark.asyncio
    async def test_blocked_prompt(self, metrics):
        body = {"promptFeedback": {"blockReason": "SAFETY"}}
        client = _client(lambda request: httpx.Response(200, json=body), metrics)

        with pytest.raises(ModelInvocationError, match="no candidates") as exc_info:
            await client.generate("hi")

        assert exc_info.value.details["block_reason"] == "SAFETY"

    @pytest.mark.asyncio
    async def test_safety_finish_reason(self, metrics):
        client = _client(lambda request: httpx.Response(200, json=_reply("", "SAFETY")), metrics)

        with pytest.raises(ModelInvocationError, match="SAFETY"):
            await client.generate("hi")

    @pytest.mark.asyncio
    async def test_empty_text(self, metrics):
        client = _client(lambda request: httpx.Response(200, json=_reply("")), metrics)

        with pytest.raises(ModelInvocationError, match="empty"):
            await client.generate("hi")

    @pytest.mark.asyncio
    async def test_timeout(self, metrics):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = _client(handler, metrics)

        with pytest.raises(ModelInvocationError, match="timed out"):
            await client.generate("hi")

    @pytest.mark.asyncio
    async def test_non_json_body(self, metrics):
        client = _client(lambda request: httpx.Response(200, text="upstream proxy error"), metrics)

        with pytest.raises(ModelInvocationError, match="non-JSON"):
            await client.generate("hi")
