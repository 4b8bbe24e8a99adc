"""
HTTP adapter shared by the provider and model clients.

Wraps a lazily created ``httpx.AsyncClient`` configured from :class:`HttpConfig`.
Requests are issued exactly once; retrying and rate limiting are left to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    base_url: str
    timeout: float = 10.0
    max_redirects: int = 5
    verify_ssl: bool = True
    user_agent: str = "forexa/0.1.0"
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate HTTP configuration."""
        if not self.base_url:
            raise ValueError("base_url cannot be empty")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")


class HttpClient:
    """
    Thin async HTTP client bound to one upstream API.

    ``transport`` may be supplied to route requests somewhere other than the
    network, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(self, http_config: HttpConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self.http_config = http_config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"User-Agent": self.http_config.user_agent, **self.http_config.headers}
            self._client = httpx.AsyncClient(
                base_url=self.http_config.base_url,
                timeout=httpx.Timeout(self.http_config.timeout),
                follow_redirects=True,
                max_redirects=self.http_config.max_redirects,
                verify=self.http_config.verify_ssl,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def is_closed(self) -> bool:
        return self._client is None

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute GET request."""
        return await self._ensure_client().get(url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute POST request."""
        return await self._ensure_client().post(url, **kwargs)
