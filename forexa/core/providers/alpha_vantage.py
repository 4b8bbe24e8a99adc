"""Alpha Vantage数据提供商实现."""

from __future__ import annotations

from typing import Any

import httpx

from forexa.core.exceptions import DataValidationError, ProviderError, RateLimitError
from forexa.core.http_adapter import HttpConfig
from forexa.core.models.market import ProviderName
from forexa.core.models.symbols import CurrencyPair, normalize_symbol
from forexa.core.monitoring import MetricsCollector
from forexa.core.providers.base import ProviderClient

INTRADAY_INTERVALS = {"1min", "5min", "15min", "30min", "60min"}


class AlphaVantageClient(ProviderClient):
    """Classic REST forex and technical-indicator provider."""

    name = ProviderName.ALPHA_VANTAGE.value
    api_key_param = "apikey"
    BASE_URL = "https://www.alphavantage.co"
    QUERY_PATH = "/query"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        super().__init__(
            api_key,
            http_config=HttpConfig(base_url=base_url, timeout=timeout),
            transport=transport,
            metrics=metrics,
        )

    async def get_forex_intraday(self, pair: CurrencyPair | str, interval: str = "5min") -> Any:
        """获取外汇日内数据 (FX_INTRADAY)."""
        if interval not in INTRADAY_INTERVALS:
            raise DataValidationError(f"Unsupported intraday interval '{interval}', expected one of {sorted(INTRADAY_INTERVALS)}")
        pair = normalize_symbol(pair)
        return await self._request_json(
            "forex_intraday",
            self.QUERY_PATH,
            {
                "function": "FX_INTRADAY",
                "from_symbol": pair.base,
                "to_symbol": pair.quote,
                "interval": interval,
            },
        )

    async def get_technical_indicator(
        self,
        pair: CurrencyPair | str,
        indicator: str = "RSI",
        interval: str = "daily",
        time_period: int = 14,
        series_type: str = "close",
    ) -> Any:
        """获取技术指标序列, e.g. 14-period daily RSI on close."""
        pair = normalize_symbol(pair)
        return await self._request_json(
            "technical_indicator",
            self.QUERY_PATH,
            {
                "function": indicator.upper(),
                "symbol": pair.concatenated,
                "interval": interval,
                "time_period": time_period,
                "series_type": series_type,
            },
        )

    async def get_economic_calendar(self) -> Any:
        """获取经济日历."""
        return await self._request_json(
            "economic_calendar",
            self.QUERY_PATH,
            {"function": "ECONOMIC_CALENDAR"},
            allow_text=True,
        )

    def _check_payload(self, operation: str, payload: Any) -> None:
        if not isinstance(payload, dict):
            return
        if "Error Message" in payload:
            raise ProviderError(
                f"Alpha Vantage API error: {payload['Error Message']}",
                self.name,
                operation,
            )
        # "Note" and "Information" are the throttling / premium notices
        for key in ("Note", "Information"):
            if key in payload and len(payload) == 1:
                raise RateLimitError(f"Alpha Vantage notice: {payload[key]}", self.name, operation)
