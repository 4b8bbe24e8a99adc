"""Polygon.io aggregates, snapshots, news and reference data."""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx

from forexa.core.exceptions import AuthenticationError, DataValidationError, ProviderError
from forexa.core.http_adapter import HttpConfig
from forexa.core.models.market import ProviderName
from forexa.core.models.symbols import CurrencyPair, normalize_currency, normalize_symbol
from forexa.core.monitoring import MetricsCollector
from forexa.core.providers.base import ProviderClient

MAX_NEWS_LIMIT = 1000


class PolygonClient(ProviderClient):
    """Polygon.io forex endpoints. Pairs are addressed as ``C:EURUSD`` tickers."""

    name = ProviderName.POLYGON.value
    api_key_param = "apiKey"
    BASE_URL = "https://api.polygon.io"

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

    async def get_conversion(self, from_currency: str, to_currency: str) -> Any:
        """Spot conversion rate between two currencies."""
        source = normalize_currency(from_currency)
        target = normalize_currency(to_currency)
        return await self._request_json("conversion", f"/v1/conversion/{source}/{target}")

    async def get_aggregates(
        self,
        pair: CurrencyPair | str,
        start: date | str,
        end: date | str,
        multiplier: int = 5,
        timespan: str = "minute",
    ) -> Any:
        """OHLC aggregate bars for ``pair`` between ``start`` and ``end`` (inclusive)."""
        if multiplier <= 0:
            raise DataValidationError("multiplier must be positive")
        pair = normalize_symbol(pair)
        path = f"/v2/aggs/ticker/{pair.polygon_ticker}/range/{multiplier}/{timespan}/{_as_day(start)}/{_as_day(end)}"
        return await self._request_json("aggregates", path)

    async def get_previous_close(self, pair: CurrencyPair | str) -> Any:
        pair = normalize_symbol(pair)
        return await self._request_json("previous_close", f"/v2/aggs/ticker/{pair.polygon_ticker}/prev")

    async def get_snapshot(self, pair: CurrencyPair | str) -> Any:
        """Point-in-time snapshot for a single forex ticker."""
        pair = normalize_symbol(pair)
        return await self._request_json(
            "snapshot",
            f"/v2/snapshot/locale/global/markets/forex/tickers/{pair.polygon_ticker}",
        )

    async def get_gainers_losers(self, direction: str = "gainers") -> Any:
        """Top forex movers in one direction."""
        if direction not in ("gainers", "losers"):
            raise DataValidationError("direction must be 'gainers' or 'losers'")
        return await self._request_json(
            "gainers_losers",
            f"/v2/snapshot/locale/global/markets/forex/{direction}",
        )

    async def get_news(self, ticker: str = "C:FOREX", limit: int = 10) -> Any:
        """Most recent news articles, at most ``limit`` of them."""
        if not 1 <= limit <= MAX_NEWS_LIMIT:
            raise DataValidationError(f"limit must be between 1 and {MAX_NEWS_LIMIT}")
        return await self._request_json("news", "/v2/reference/news", {"ticker": ticker, "limit": limit})

    async def get_technical_indicator(
        self,
        pair: CurrencyPair | str,
        indicator: str = "sma",
        timespan: str = "day",
        window: int = 14,
    ) -> Any:
        pair = normalize_symbol(pair)
        return await self._request_json(
            "technical_indicator",
            f"/v1/indicators/{indicator.lower()}/{pair.polygon_ticker}",
            {"timespan": timespan, "window": window},
        )

    async def get_market_status(self) -> Any:
        return await self._request_json("market_status", "/v1/marketstatus/now")

    def _check_payload(self, operation: str, payload: Any) -> None:
        if not isinstance(payload, dict):
            return
        status = payload.get("status")
        if status == "NOT_AUTHORIZED":
            raise AuthenticationError(
                f"Polygon.io not authorized: {payload.get('message', 'no message')}",
                self.name,
                operation,
            )
        if status == "ERROR":
            raise ProviderError(
                f"Polygon.io API error: {payload.get('error') or payload.get('message') or 'unknown error'}",
                self.name,
                operation,
            )


def _as_day(value: date | str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return value
