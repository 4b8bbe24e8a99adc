"""
Google Gemini client.

Calls the ``generateContent`` REST endpoint directly over httpx. The API key is
sent in the ``x-goog-api-key`` header so it never appears in a URL.
"""

from __future__ import annotations

import time
from typing import Any

import httpx

from forexa.core.exceptions import ModelInvocationError
from forexa.core.http_adapter import HttpClient, HttpConfig
from forexa.core.logging import get_logger
from forexa.core.monitoring import MetricsCollector, get_metrics_collector

logger = get_logger(__name__)

DEFAULT_MODEL_ID = "gemini-2.0-flash-exp"
_ACCEPTED_FINISH_REASONS = {"", "STOP", "MAX_TOKENS", "FINISH_REASON_UNSPECIFIED"}


class GeminiClient:
    """Client for the Gemini generative model."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str,
        model_id: str = DEFAULT_MODEL_ID,
        *,
        base_url: str = BASE_URL,
        timeout: float = 60.0,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
        transport: httpx.AsyncBaseTransport | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.model_id = model_id
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.http_client = HttpClient(
            HttpConfig(base_url=base_url, timeout=timeout, headers={"x-goog-api-key": api_key}),
            transport=transport,
        )
        self.metrics = metrics or get_metrics_collector()

    def __repr__(self) -> str:
        return f"GeminiClient(model_id={self.model_id!r})"

    async def close(self) -> None:
        await self.http_client.close()

    async def generate(self, prompt: str) -> str:
        """Generate text for ``prompt``; raises ModelInvocationError on any call failure."""

        start = time.perf_counter()
        try:
            text = await self._generate(prompt)
        except ModelInvocationError as exc:
            self.metrics.record_model_invocation("failure")
            logger.bind(error_code=exc.error_code.value).warning(f"Gemini {self.model_id} call failed: {exc.message}")
            raise
        self.metrics.record_model_invocation("success")
        logger.debug(f"Gemini {self.model_id} responded in {time.perf_counter() - start:.2f}s ({len(text)} chars)")
        return text

    async def _generate(self, prompt: str) -> str:
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }
        try:
            response = await self.http_client.post(f"/models/{self.model_id}:generateContent", json=payload)
        except httpx.TimeoutException as exc:
            raise ModelInvocationError(f"Gemini {self.model_id} timed out", self.model_id, cause=exc) from exc
        except httpx.HTTPError as exc:
            raise ModelInvocationError(
                f"Gemini {self.model_id} request failed: {type(exc).__name__}", self.model_id, cause=exc
            ) from exc

        if not response.is_success:
            raise ModelInvocationError(
                f"Gemini {self.model_id} returned HTTP {response.status_code}: {_error_message(response)}",
                self.model_id,
                details={"status_code": response.status_code},
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise ModelInvocationError(f"Gemini {self.model_id} returned a non-JSON body", self.model_id, cause=exc) from exc
        return self._extract_text(result)

    def _extract_text(self, result: Any) -> str:
        candidates = result.get("candidates") if isinstance(result, dict) else None
        if not candidates:
            block_reason = (result.get("promptFeedback") or {}).get("blockReason") if isinstance(result, dict) else None
            raise ModelInvocationError(
                f"Gemini {self.model_id} returned no candidates",
                self.model_id,
                details={"block_reason": block_reason} if block_reason else None,
            )

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason") or ""
        if finish_reason not in _ACCEPTED_FINISH_REASONS:
            raise ModelInvocationError(
                f"Gemini {self.model_id} stopped generating: {finish_reason}",
                self.model_id,
                details={"finish_reason": finish_reason},
            )

        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text:
            raise ModelInvocationError(f"Gemini {self.model_id} returned an empty response", self.model_id)
        return text


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))[:200]
    return str(body)[:200]
