"""Base class shared by the market-data provider clients."""

from __future__ import annotations

import time
from typing import Any

import httpx

from forexa.core.exceptions import (
    AuthenticationError,
    ErrorCode,
    ProviderError,
    RateLimitError,
)
from forexa.core.http_adapter import HttpClient, HttpConfig
from forexa.core.logging import get_logger
from forexa.core.monitoring import MetricsCollector, get_metrics_collector

logger = get_logger(__name__)


class ProviderClient:
    """
    One upstream market-data API.

    Every public operation issues a single GET and returns the decoded JSON
    payload unmodified. Any failure is raised as :class:`ProviderError` tagged
    with the provider name and the operation, so callers can attribute it.
    """

    name: str = "provider"
    api_key_param: str = "apikey"

    def __init__(
        self,
        api_key: str,
        *,
        http_config: HttpConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.api_key = api_key
        self.http_client = HttpClient(http_config, transport=transport)
        self.metrics = metrics or get_metrics_collector()

    async def close(self) -> None:
        await self.http_client.close()

    async def __aenter__(self) -> "ProviderClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.http_client.http_config.base_url!r})"

    async def _request_json(
        self,
        operation: str,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        allow_text: bool = False,
    ) -> Any:
        """Issue one GET for ``operation`` and return the decoded body.

        With ``allow_text`` a body that is not JSON (CSV exports) is returned as text.
        """

        query = {**(params or {}), self.api_key_param: self.api_key}
        start = time.perf_counter()
        try:
            payload = await self._fetch(operation, path, query, allow_text)
            self._check_payload(operation, payload)
        except ProviderError as exc:
            self.metrics.observe_provider_call(self.name, operation, time.perf_counter() - start, success=False)
            logger.bind(provider=self.name, error_code=exc.error_code.value).debug(
                f"{self.name} {operation} failed: {exc.message}"
            )
            raise
        latency = time.perf_counter() - start
        self.metrics.observe_provider_call(self.name, operation, latency, success=True)
        logger.bind(provider=self.name).debug(f"{self.name} {operation} GET {path} ok in {latency:.3f}s")
        return payload

    async def _fetch(self, operation: str, path: str, query: dict[str, Any], allow_text: bool = False) -> Any:
        try:
            response = await self.http_client.get(path, params=query)
        except httpx.TimeoutException as exc:
            raise ProviderError(
                f"{self.name} {operation} timed out",
                self.name,
                operation,
                cause=exc,
                error_code=ErrorCode.PROVIDER_TIMEOUT,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name} {operation} request failed: {type(exc).__name__}", self.name, operation, cause=exc) from exc

        status = response.status_code
        if status in (401, 403):
            raise AuthenticationError(
                f"{self.name} rejected credentials for {operation} (HTTP {status})",
                self.name,
                operation,
                details={"status_code": status},
            )
        if status == 429:
            raise RateLimitError(
                f"{self.name} rate limited {operation} (HTTP 429)",
                self.name,
                operation,
                details={"status_code": status},
            )
        if not response.is_success:
            raise ProviderError(
                f"HTTP error from {self.name} {operation}: {status}",
                self.name,
                operation,
                details={"status_code": status},
            )

        try:
            return response.json()
        except ValueError as exc:
            if allow_text:
                return response.text
            raise ProviderError(f"{self.name} {operation} returned a non-JSON body", self.name, operation, cause=exc) from exc

    def _check_payload(self, operation: str, payload: Any) -> None:
        """Raise when a 2xx body is actually a provider error envelope."""
