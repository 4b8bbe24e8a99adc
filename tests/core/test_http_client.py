"""Tests for the HTTP adapter."""

import httpx
import pytest

from forexa.core.http_adapter import HttpClient, HttpConfig


class TestHttpConfig:
    """Test HttpConfig data class."""

    def test_defaults(self):
        config = HttpConfig(base_url="https://api.example.com")

        assert config.timeout == 10.0
        assert config.max_redirects == 5
        assert config.verify_ssl is True
        assert config.user_agent == "forexa/0.1.0"
        assert config.headers == {}

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"base_url": ""}, "base_url cannot be empty"),
            ({"base_url": "https://x.test", "timeout": 0}, "timeout must be positive"),
            ({"base_url": "https://x.test", "max_redirects": -1}, "max_redirects must be non-negative"),
        ],
    )
    def test_validation(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            HttpConfig(**kwargs)


class TestHttpClient:
    """Test HttpClient against a mock transport."""

    @pytest.mark.asyncio
    async def test_get_sends_headers_and_merges_base_url(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        config = HttpConfig(base_url="https://api.example.com/v1", headers={"X-Test": "1"})
        async with HttpClient(config, transport=httpx.MockTransport(handler)) as client:
            response = await client.get("/items", params={"q": "fx"})

        assert response.json() == {"ok": True}
        request = seen[0]
        assert str(request.url) == "https://api.example.com/v1/items?q=fx"
        assert request.headers["User-Agent"] == "forexa/0.1.0"
        assert request.headers["X-Test"] == "1"

    @pytest.mark.asyncio
    async def test_post_sends_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=request.content)

        client = HttpClient(HttpConfig(base_url="https://api.example.com"), transport=httpx.MockTransport(handler))
        response = await client.post("/echo", json={"a": 1})
        await client.close()

        assert response.json() == {"a": 1}

    @pytest.mark.asyncio
    async def test_client_is_lazy_and_closable(self):
        client = HttpClient(
            HttpConfig(base_url="https://api.example.com"),
            transport=httpx.MockTransport(lambda request: httpx.Response(204)),
        )
        assert client.is_closed

        await client.get("/ping")
        assert not client.is_closed

        await client.close()
        assert client.is_closed
