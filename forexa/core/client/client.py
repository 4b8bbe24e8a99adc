"""forexa主客户端 - 组装数据源、模型和预测服务"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from forexa.core.ai import GeminiClient, GenerativeModel
from forexa.core.config import ConfigManager, ForexaConfig
from forexa.core.exceptions import ConfigurationError
from forexa.core.logging import get_logger
from forexa.core.models import (
    CompositeMarketData,
    CurrencyPair,
    FeatureSet,
    Prediction,
    PredictionOutcome,
)
from forexa.core.monitoring import MetricsCollector, get_metrics_collector
from forexa.core.providers import AlphaVantageClient, PolygonClient
from forexa.core.services.market_data import MarketDataService
from forexa.core.services.prediction import PredictionService

logger = get_logger(__name__)


class ForexaClient:
    """forexa主客户端

    Wires the provider clients, the generative model and the services from a
    :class:`ForexaConfig`. Any collaborator may be injected instead, in which case
    its credential is not required.
    """

    def __init__(
        self,
        config: ForexaConfig | dict[str, Any] | None = None,
        *,
        alpha_vantage: AlphaVantageClient | None = None,
        polygon: PolygonClient | None = None,
        model: GenerativeModel | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """初始化客户端

        Args:
            config: 配置对象或配置字典；为None时从配置文件和环境变量加载
            alpha_vantage: 可选的Alpha Vantage客户端
            polygon: 可选的Polygon.io客户端
            model: 可选的生成模型
            metrics: 可选的指标收集器

        Raises:
            ConfigurationError: 缺少所需的API密钥
        """
        if isinstance(config, ForexaConfig):
            self.config = config
        else:
            manager = ConfigManager()
            if config:
                manager.update_config(**config)
            self.config = manager.get_config()

        self.metrics = metrics or get_metrics_collector()
        providers = self.config.providers
        credentials = self.config.credentials

        self.alpha_vantage = alpha_vantage or AlphaVantageClient(
            _require(credentials.alpha_vantage_key, "credentials.alpha_vantage_key", "ALPHA_VANTAGE_API_KEY"),
            base_url=providers.alpha_vantage_base_url,
            timeout=providers.timeout,
            metrics=self.metrics,
        )
        self.polygon = polygon or PolygonClient(
            _require(credentials.polygon_key, "credentials.polygon_key", "POLYGON_API_KEY"),
            base_url=providers.polygon_base_url,
            timeout=providers.timeout,
            metrics=self.metrics,
        )
        self.model = model or GeminiClient(
            _require(credentials.google_api_key, "credentials.google_api_key", "GOOGLE_API_KEY"),
            self.config.model.model_id,
            base_url=self.config.model.base_url,
            timeout=self.config.model.timeout,
            temperature=self.config.model.temperature,
            max_output_tokens=self.config.model.max_output_tokens,
            metrics=self.metrics,
        )

        self.market_data = MarketDataService(
            self.alpha_vantage,
            self.polygon,
            intraday_interval=providers.intraday_interval,
            technical_indicator=providers.technical_indicator,
            news_ticker=providers.news_ticker,
            news_limit=providers.news_limit,
            provider_timeout=providers.timeout,
        )
        self.predictions = PredictionService(
            self.market_data,
            self.model,
            metrics=self.metrics,
            concurrency_limit=self.config.web.batch_concurrency,
        )
        logger.debug(f"ForexaClient ready (model {self.model.model_id})")

    async def __aenter__(self) -> ForexaClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """关闭所有HTTP连接"""
        await self.alpha_vantage.close()
        await self.polygon.close()
        await self.model.close()

    async def get_comprehensive_market_data(self, symbol: str | CurrencyPair) -> CompositeMarketData:
        return await self.market_data.get_comprehensive_market_data(symbol)

    def prepare_data_for_ai(self, market_data: CompositeMarketData) -> FeatureSet:
        return self.market_data.prepare_data_for_ai(market_data)

    async def generate_prediction(self, symbol: str | CurrencyPair) -> Prediction:
        return await self.predictions.generate_prediction(symbol)

    async def generate_batch_predictions(
        self, symbols: Sequence[str], fail_fast: bool = False
    ) -> list[PredictionOutcome]:
        return await self.predictions.generate_batch_predictions(symbols, fail_fast=fail_fast)

    async def get_forex_rate(self, from_currency: str, to_currency: str) -> Any:
        return await self.market_data.get_forex_rate(from_currency, to_currency)

    async def get_market_gainers_losers(self, direction: str = "gainers") -> Any:
        return await self.market_data.get_market_gainers_losers(direction)

    async def get_polygon_technical_indicators(self, currency_pair: str | CurrencyPair, indicator: str = "SMA") -> Any:
        return await self.market_data.get_polygon_technical_indicators(currency_pair, indicator)

    async def get_market_status(self) -> Any:
        return await self.market_data.get_market_status()

    async def get_previous_close(self, symbol: str | CurrencyPair) -> Any:
        return await self.market_data.get_previous_close(symbol)

    async def get_economic_calendar(self) -> Any:
        return await self.market_data.get_economic_calendar()


def _require(value: str, config_key: str, env_name: str) -> str:
    if not value:
        raise ConfigurationError(f"Missing API key: set {env_name} or {config_key}", config_key=config_key)
    return value
