"""AI prediction engine: market data → features → prompt → model → verdict."""

from __future__ import annotations

from collections.abc import Sequence

from forexa.core.ai import GenerativeModel
from forexa.core.logging import get_logger
from forexa.core.models import CurrencyPair, Prediction, PredictionOutcome, normalize_symbol
from forexa.core.monitoring import MetricsCollector, get_metrics_collector
from forexa.core.services.batch import BatchPredictionRunner
from forexa.core.services.market_data import Clock, MarketDataService, utc_now
from forexa.core.services.parsing import parse_model_response
from forexa.core.services.prompts import build_analysis_prompt

logger = get_logger(__name__)


class PredictionService:
    """Generate trading predictions for currency pairs."""

    def __init__(
        self,
        market_data: MarketDataService,
        model: GenerativeModel,
        *,
        clock: Clock = utc_now,
        metrics: MetricsCollector | None = None,
        concurrency_limit: int | None = None,
    ):
        self.market_data = market_data
        self.model = model
        self.metrics = metrics or get_metrics_collector()
        self.concurrency_limit = concurrency_limit
        self._clock = clock

    async def generate_prediction(self, symbol: str | CurrencyPair) -> Prediction:
        """生成单个货币对的预测.

        Raises:
            DataValidationError: 无效的货币对
            AggregationError: 所有数据源调用均失败
            ModelInvocationError: 模型调用失败
        """
        pair = normalize_symbol(symbol)
        composite = await self.market_data.get_comprehensive_market_data(pair)
        features = self.market_data.prepare_data_for_ai(composite)
        prompt = build_analysis_prompt(features)

        text = await self.model.generate(prompt)
        verdict = parse_model_response(text)
        if not verdict.parsed:
            self.metrics.record_fallback(verdict.fallback_reason or "")
            logger.warning(f"Unparseable model reply for {pair} ({verdict.fallback_reason}), defaulting to HOLD")

        prediction = Prediction(
            symbol=pair.slashed,
            action=verdict.action,
            confidence=verdict.confidence,
            reasoning=verdict.reasoning,
            risk_level=verdict.risk_level,
            timeframe=verdict.timeframe,
            model_id=self.model.model_id,
            generated_at=self._clock(),
            source_features=features,
        )
        logger.info(
            f"Prediction for {pair}: {prediction.action.value} "
            f"(confidence {prediction.confidence:.2f}, risk {prediction.risk_level.value})"
        )
        return prediction

    async def generate_batch_predictions(
        self, symbols: Sequence[str], fail_fast: bool = False
    ) -> list[PredictionOutcome]:
        runner = BatchPredictionRunner(self, concurrency_limit=self.concurrency_limit)
        return await runner.run(symbols, fail_fast=fail_fast)
