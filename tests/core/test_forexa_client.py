"""Tests for ForexaClient wiring."""

from unittest.mock import AsyncMock

import asyncio

import httpx
import pytest

from forexa import ForexaClient
from forexa.core.ai import GeminiClient
from forexa.core.config import CredentialsConfig, ForexaConfig, ModelConfig, ProviderConfig
from forexa.core.exceptions import ConfigurationError
from forexa.core.models import FeedSlot, TradeAction
from forexa.core.providers import AlphaVantageClient, PolygonClient


def _config(**credentials) -> ForexaConfig:
    return ForexaConfig(
        providers=ProviderConfig(timeout=3.0, news_limit=5),
        model=ModelConfig(model_id="gemini-test", timeout=30.0),
        credentials=CredentialsConfig(**credentials),
    )


FULL_CREDENTIALS = {"alpha_vantage_key": "av", "polygon_key": "poly", "google_api_key": "google"}


class TestClientConstruction:
    def test_builds_components_from_config(self, metrics):
        client = ForexaClient(_config(**FULL_CREDENTIALS), metrics=metrics)

        assert isinstance(client.alpha_vantage, AlphaVantageClient)
        assert isinstance(client.polygon, PolygonClient)
        assert isinstance(client.model, GeminiClient)
        assert client.model.model_id == "gemini-test"
        assert client.polygon.http_client.http_config.timeout == 3.0
        assert client.model.http_client.http_config.timeout == 30.0
        assert client.market_data.news_limit == 5
        assert client.market_data.provider_timeout == 3.0

    @pytest.mark.parametrize(
        ("missing", "config_key"),
        [
            ("alpha_vantage_key", "credentials.alpha_vantage_key"),
            ("polygon_key", "credentials.polygon_key"),
            ("google_api_key", "credentials.google_api_key"),
        ],
    )
    def test_missing_credentials(self, metrics, missing, config_key):
        credentials = {**FULL_CREDENTIALS, missing: ""}

        with pytest.raises(ConfigurationError) as exc_info:
            ForexaClient(_config(**credentials), metrics=metrics)

        assert exc_info.value.config_key == config_key

    def test_injected_collaborators_need_no_credentials(self, metrics):
        model = AsyncMock()
        model.model_id = "fake"
        alpha_vantage = AlphaVantageClient("x", metrics=metrics)
        polygon = PolygonClient("y", metrics=metrics)

        client = ForexaClient(_config(), alpha_vantage=alpha_vantage, polygon=polygon, model=model, metrics=metrics)

        assert client.model is model
        assert client.alpha_vantage is alpha_vantage


class TestClientEndToEnd:
    @pytest.mark.asyncio
    async def test_prediction_over_mock_transports(self, metrics):
        def alpha_vantage_handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["function"] == "FX_INTRADAY":
                return httpx.Response(200, json={"Time Series FX (5min)": {"t": {"4. close": "1.0950"}}})
            return httpx.Response(200, json={"Note": "API call frequency exceeded"})

        def polygon_handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        def gemini_handler(request: httpx.Request) -> httpx.Response:
            text = '{"prediction": "SELL", "confidence": "80%", "risk_level": "HIGH"}'
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

        client = ForexaClient(
            _config(),
            alpha_vantage=AlphaVantageClient("av", transport=httpx.MockTransport(alpha_vantage_handler), metrics=metrics),
            polygon=PolygonClient("poly", transport=httpx.MockTransport(polygon_handler), metrics=metrics),
            model=GeminiClient("google", "gemini-test", transport=httpx.MockTransport(gemini_handler), metrics=metrics),
            metrics=metrics,
        )

        async with client:
            composite = await client.get_comprehensive_market_data("EUR/USD")
            prediction = await client.generate_prediction("EUR/USD")

        assert list(composite.results) == [FeedSlot.INTRADAY]
        assert composite.contributing_sources == ["Alpha Vantage"]
        assert prediction.action == TradeAction.SELL
        assert prediction.confidence == pytest.approx(0.8)
        assert prediction.source_features.price == {"4. close": "1.0950"}
        assert prediction.source_features.metadata.data_source == "Alpha Vantage"
        assert client.polygon.http_client.is_closed

    @pytest.mark.asyncio
    async def test_configured_timeout_bounds_each_feed(self, metrics):
        async def polygon_handler(request: httpx.Request) -> httpx.Response:
            if "/snapshot/" in request.url.path:
                await asyncio.sleep(5)
            return httpx.Response(200, json={"status": "OK", "results": []})

        def alpha_vantage_handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"Time Series FX (5min)": {}})

        config = ForexaConfig(providers=ProviderConfig(timeout=0.05))
        client = ForexaClient(
            config,
            alpha_vantage=AlphaVantageClient("av", transport=httpx.MockTransport(alpha_vantage_handler), metrics=metrics),
            polygon=PolygonClient("poly", transport=httpx.MockTransport(polygon_handler), metrics=metrics),
            model=AsyncMock(),
            metrics=metrics,
        )

        async with client:
            composite = await client.get_comprehensive_market_data("EUR/USD")

        assert FeedSlot.SNAPSHOT not in composite.results
        assert FeedSlot.NEWS in composite.results
