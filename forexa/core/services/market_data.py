"""Market data aggregation across the Alpha Vantage and Polygon.io clients."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from forexa.core.exceptions import AggregationError, DataValidationError, ErrorCode, ProviderError
from forexa.core.logging import get_logger
from forexa.core.models import (
    CompositeMarketData,
    CurrencyPair,
    FeatureSet,
    FeedSlot,
    RawProviderResult,
    normalize_symbol,
)
from forexa.core.providers import AlphaVantageClient, PolygonClient
from forexa.core.services.features import prepare_data_for_ai

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class FeedCall:
    """One constituent call of a comprehensive fetch."""

    slot: FeedSlot
    provider: str
    operation: str
    invoke: Callable[[], Awaitable[Any]]


class MarketDataService:
    """
    Fan-out aggregator over the provider clients.

    ``get_comprehensive_market_data`` settles all constituent calls: a failing
    call only drops its own slot, and the request fails with
    :class:`AggregationError` only when nothing succeeded. The remaining
    operations are single-call passthroughs whose errors propagate unchanged.
    """

    def __init__(
        self,
        alpha_vantage: AlphaVantageClient,
        polygon: PolygonClient,
        *,
        intraday_interval: str = "5min",
        technical_indicator: str = "RSI",
        news_ticker: str = "C:FOREX",
        news_limit: int = 10,
        provider_timeout: float | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.alpha_vantage = alpha_vantage
        self.polygon = polygon
        self.intraday_interval = intraday_interval
        self.technical_indicator = technical_indicator
        self.news_ticker = news_ticker
        self.news_limit = news_limit
        self.provider_timeout = provider_timeout
        self._clock = clock

    def plan_feed_calls(self, pair: CurrencyPair, now: datetime) -> list[FeedCall]:
        """Build the fixed fan-out set for ``pair``; aggregates cover the trailing 24 hours."""

        start = (now - timedelta(days=1)).date()
        end = now.date()
        av = self.alpha_vantage.name
        poly = self.polygon.name
        return [
            FeedCall(
                FeedSlot.INTRADAY,
                av,
                "forex_intraday",
                lambda: self.alpha_vantage.get_forex_intraday(pair, self.intraday_interval),
            ),
            FeedCall(
                FeedSlot.TECHNICAL,
                av,
                "technical_indicator",
                lambda: self.alpha_vantage.get_technical_indicator(pair, self.technical_indicator),
            ),
            FeedCall(
                FeedSlot.AGGREGATES,
                poly,
                "aggregates",
                lambda: self.polygon.get_aggregates(pair, start, end, multiplier=5, timespan="minute"),
            ),
            FeedCall(FeedSlot.SNAPSHOT, poly, "snapshot", lambda: self.polygon.get_snapshot(pair)),
            FeedCall(
                FeedSlot.NEWS,
                poly,
                "news",
                lambda: self.polygon.get_news(self.news_ticker, self.news_limit),
            ),
        ]

    async def get_comprehensive_market_data(self, symbol: str | CurrencyPair) -> CompositeMarketData:
        pair = normalize_symbol(symbol)
        timestamp = self._clock()
        calls = self.plan_feed_calls(pair, timestamp)

        outcomes = await asyncio.gather(*(self._settle(call) for call in calls), return_exceptions=True)

        results: dict[FeedSlot, RawProviderResult] = {}
        failures: list[ProviderError] = []
        for call, outcome in zip(calls, outcomes):
            if isinstance(outcome, ProviderError):
                failures.append(outcome)
                logger.bind(provider=call.provider, error_code=outcome.error_code.value).warning(
                    f"Omitting {call.slot.value} for {pair}: {outcome.message}"
                )
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results[call.slot] = outcome

        if not results:
            raise AggregationError(pair.slashed, failures)

        contributing: list[str] = []
        for call in calls:
            if call.slot in results and call.provider not in contributing:
                contributing.append(call.provider)

        logger.info(
            f"Aggregated {len(results)}/{len(calls)} feeds for {pair} from {' + '.join(contributing)}",
        )
        return CompositeMarketData(
            symbol=pair.slashed,
            timestamp=timestamp,
            results=results,
            contributing_sources=contributing,
        )

    async def _settle(self, call: FeedCall) -> RawProviderResult:
        fetched_at = self._clock()
        payload = await self._guard(call.provider, call.operation, call.invoke)
        return RawProviderResult(
            provider=call.provider,
            operation=call.operation,
            payload=payload,
            fetched_at=fetched_at,
        )

    async def _guard(self, provider: str, operation: str, invoke: Callable[[], Awaitable[Any]]) -> Any:
        """Await ``invoke`` under the call timeout, attributing any failure to the call."""

        try:
            if self.provider_timeout is None:
                return await invoke()
            return await asyncio.wait_for(invoke(), timeout=self.provider_timeout)
        except (ProviderError, DataValidationError):
            raise
        except asyncio.TimeoutError as exc:
            raise ProviderError(
                f"{provider} {operation} exceeded {self.provider_timeout}s",
                provider,
                operation,
                cause=exc,
                error_code=ErrorCode.PROVIDER_TIMEOUT,
            ) from exc
        except Exception as exc:
            raise ProviderError(f"{provider} {operation} failed: {exc}", provider, operation, cause=exc) from exc

    def prepare_data_for_ai(self, market_data: CompositeMarketData) -> FeatureSet:
        return prepare_data_for_ai(market_data)

    async def get_forex_rate(self, from_currency: str, to_currency: str) -> Any:
        return await self._passthrough(
            self.polygon.name,
            "conversion",
            lambda: self.polygon.get_conversion(from_currency, to_currency),
        )

    async def get_market_gainers_losers(self, direction: str = "gainers") -> Any:
        return await self._passthrough(
            self.polygon.name,
            "gainers_losers",
            lambda: self.polygon.get_gainers_losers(direction),
        )

    async def get_polygon_technical_indicators(self, currency_pair: str | CurrencyPair, indicator: str = "SMA") -> Any:
        pair = normalize_symbol(currency_pair)
        return await self._passthrough(
            self.polygon.name,
            "technical_indicator",
            lambda: self.polygon.get_technical_indicator(pair, indicator),
        )

    async def get_market_status(self) -> Any:
        return await self._passthrough(self.polygon.name, "market_status", self.polygon.get_market_status)

    async def get_previous_close(self, symbol: str | CurrencyPair) -> Any:
        pair = normalize_symbol(symbol)
        return await self._passthrough(
            self.polygon.name,
            "previous_close",
            lambda: self.polygon.get_previous_close(pair),
        )

    async def get_economic_calendar(self) -> Any:
        return await self._passthrough(
            self.alpha_vantage.name,
            "economic_calendar",
            self.alpha_vantage.get_economic_calendar,
        )

    async def _passthrough(self, provider: str, operation: str, invoke: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await self._guard(provider, operation, invoke)
        except ProviderError as exc:
            logger.bind(provider=provider, error_code=exc.error_code.value).error(f"{operation} failed: {exc.message}")
            raise
