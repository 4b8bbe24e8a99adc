"""Tests for the prediction engine."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from forexa.core.exceptions import AggregationError, ModelInvocationError, ProviderError
from forexa.core.models import CompositeMarketData, FeedSlot, RawProviderResult, TradeAction
from forexa.core.services.market_data import MarketDataService
from forexa.core.services.prediction import PredictionService

NOW = datetime(2024, 1, 2, 12, 30, tzinfo=timezone.utc)
INTRADAY = {"Time Series FX (5min)": {"2024-01-02 12:25:00": {"4. close": "1.0950"}}}


class FakeModel:
    def __init__(self, reply: str = "", error: Exception | None = None):
        self.model_id = "gemini-test"
        self.generate = AsyncMock(return_value=reply, side_effect=error)
        self.close = AsyncMock()


def _composite(symbol: str = "EUR/USD") -> CompositeMarketData:
    return CompositeMarketData(
        symbol=symbol,
        timestamp=NOW,
        results={
            FeedSlot.INTRADAY: RawProviderResult(
                provider="Alpha Vantage", operation="forex_intraday", payload=INTRADAY, fetched_at=NOW
            )
        },
        contributing_sources=["Alpha Vantage"],
    )


@pytest.fixture
def market_data() -> MarketDataService:
    service = MarketDataService(AsyncMock(), AsyncMock(), clock=lambda: NOW)
    service.get_comprehensive_market_data = AsyncMock(return_value=_composite())
    return service


def _service(market_data, model, metrics) -> PredictionService:
    return PredictionService(market_data, model, clock=lambda: NOW, metrics=metrics)


class TestGeneratePrediction:
    @pytest.mark.asyncio
    async def test_happy_path(self, market_data, metrics):
        model = FakeModel('Analysis:\n{"prediction": "BUY", "confidence": 0.9, "reasoning": "uptrend"}\nDone.')

        prediction = await _service(market_data, model, metrics).generate_prediction("eurusd")

        assert prediction.symbol == "EUR/USD"
        assert prediction.action == TradeAction.BUY
        assert prediction.confidence == 0.9
        assert prediction.reasoning == "uptrend"
        assert prediction.model_id == "gemini-test"
        assert prediction.generated_at == NOW
        assert prediction.source_features.price == {"4. close": "1.0950"}
        assert prediction.source_features.metadata.data_source == "Alpha Vantage"

    @pytest.mark.asyncio
    async def test_prompt_built_from_features(self, market_data, metrics):
        model = FakeModel('{"prediction": "HOLD"}')

        await _service(market_data, model, metrics).generate_prediction("EUR/USD")

        prompt = model.generate.await_args.args[0]
        assert "- Symbol: EUR/USD" in prompt
        assert '"4. close": "1.0950"' in prompt

    @pytest.mark.asyncio
    async def test_unparseable_reply_defaults_and_is_counted(self, market_data, metrics, registry):
        model = FakeModel("The market looks uncertain today.")

        prediction = await _service(market_data, model, metrics).generate_prediction("EUR/USD")

        assert prediction.action == TradeAction.HOLD
        assert prediction.confidence == 0.5
        assert prediction.reasoning == "The market looks uncertain today."
        assert registry.get_sample_value("forexa_prediction_fallbacks_total", {"reason": "no_json"}) == 1.0

    @pytest.mark.asyncio
    async def test_model_failure_propagates(self, market_data, metrics):
        model = FakeModel(error=ModelInvocationError("quota exceeded", "gemini-test"))

        with pytest.raises(ModelInvocationError):
            await _service(market_data, model, metrics).generate_prediction("EUR/USD")

    @pytest.mark.asyncio
    async def test_aggregation_failure_skips_model(self, market_data, metrics):
        market_data.get_comprehensive_market_data.side_effect = AggregationError(
            "EUR/USD", [ProviderError("down", "Polygon.io", "news")]
        )
        model = FakeModel('{"prediction": "BUY"}')

        with pytest.raises(AggregationError):
            await _service(market_data, model, metrics).generate_prediction("EUR/USD")

        model.generate.assert_not_awaited()


class TestGenerateBatchPredictions:
    @pytest.mark.asyncio
    async def test_delegates_to_runner(self, market_data, metrics):
        model = FakeModel('{"prediction": "SELL", "confidence": 0.6}')

        outcomes = await _service(market_data, model, metrics).generate_batch_predictions(["EUR/USD", "bad"])

        assert [outcome.symbol for outcome in outcomes] == ["EUR/USD", "bad"]
        assert outcomes[0].prediction.action == TradeAction.SELL
        assert outcomes[1].error.error_code == "VALIDATION_ERROR"
