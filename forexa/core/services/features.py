"""
Feature extraction from composite provider data.

All knowledge of provider payload shapes lives here. Every accessor degrades to an
empty structure instead of raising, because partial provider failure is normal.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from forexa.core.models import CompositeMarketData, FeatureMetadata, FeatureSet, FeedSlot

MAX_NEWS_ITEMS = 5
INTRADAY_SERIES_PREFIX = "Time Series FX"
TECHNICAL_SERIES_PREFIX = "Technical Analysis"


def prepare_data_for_ai(market_data: CompositeMarketData) -> FeatureSet:
    """Map a :class:`CompositeMarketData` onto the stable :class:`FeatureSet` schema."""

    return FeatureSet(
        price=_latest_intraday_entry(market_data.payload(FeedSlot.INTRADAY)),
        technical=_technical_series(market_data.payload(FeedSlot.TECHNICAL)),
        aggregate=_first_aggregate_bar(market_data.payload(FeedSlot.AGGREGATES)),
        snapshot=_snapshot(market_data.payload(FeedSlot.SNAPSHOT)),
        news=_recent_news(market_data.payload(FeedSlot.NEWS)),
        metadata=FeatureMetadata(
            symbol=market_data.symbol,
            timestamp=market_data.timestamp,
            contributing_sources=list(market_data.contributing_sources),
            data_source=" + ".join(market_data.contributing_sources),
        ),
    )


def _series_by_prefix(payload: Any, prefix: str) -> Mapping[str, Any] | None:
    if not isinstance(payload, Mapping):
        return None
    for key, value in payload.items():
        if isinstance(key, str) and key.startswith(prefix) and isinstance(value, Mapping):
            return value
    return None


def _latest_intraday_entry(payload: Any) -> dict[str, Any]:
    # the series map is keyed by timestamp, newest first
    series = _series_by_prefix(payload, INTRADAY_SERIES_PREFIX)
    if not series:
        return {}
    first = next(iter(series.values()))
    return dict(first) if isinstance(first, Mapping) else {}


def _technical_series(payload: Any) -> dict[str, Any]:
    series = _series_by_prefix(payload, TECHNICAL_SERIES_PREFIX)
    return dict(series) if series else {}


def _results(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        return payload.get("results")
    return None


def _first_aggregate_bar(payload: Any) -> dict[str, Any]:
    bars = _results(payload)
    if isinstance(bars, list) and bars and isinstance(bars[0], Mapping):
        return dict(bars[0])
    return {}


def _snapshot(payload: Any) -> dict[str, Any]:
    results = _results(payload)
    if isinstance(results, Mapping):
        return dict(results)
    # the single-ticker forex snapshot nests its body under "ticker"
    ticker = payload.get("ticker") if isinstance(payload, Mapping) else None
    if results is None and isinstance(ticker, Mapping):
        return dict(ticker)
    return {}


def _recent_news(payload: Any) -> list[dict[str, Any]]:
    articles = _results(payload)
    if not isinstance(articles, list):
        return []
    return [dict(article) for article in articles[:MAX_NEWS_ITEMS] if isinstance(article, Mapping)]

