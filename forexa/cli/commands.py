"""Prediction and market-data commands for the forexa CLI."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Mapping, TypeVar

import typer

from forexa.core.client import ForexaClient
from forexa.core.exceptions import ForexaError
from forexa.core.models import CompositeMarketData, Prediction, PredictionOutcome

from .constants import PROVIDER_EXIT_CODE
from .utils import output_stream, report_failure

T = TypeVar("T")

PREDICTION_COLUMNS = [
    "symbol",
    "action",
    "confidence",
    "risk_level",
    "timeframe",
    "model_id",
    "reasoning",
    "error",
]
MARKET_DATA_COLUMNS = ["symbol", "slot", "provider", "operation", "fetched_at"]
RATE_COLUMNS = ["from", "to", "converted", "bid", "ask", "timestamp"]
STATUS_COLUMNS = ["market", "fx", "crypto", "server_time"]


def register(app: typer.Typer) -> None:
    """Register the top-level commands on the provided application."""

    app.command("predict")(predict_command)
    app.command("market-data")(market_data_command)
    app.command("rate")(rate_command)
    app.command("status")(status_command)


def get_client() -> ForexaClient:
    """Factory hook for obtaining a :class:`ForexaClient` instance."""

    return ForexaClient()


def _execute(call: Callable[[ForexaClient], Awaitable[T]]) -> T:
    """Run ``call`` against a fresh client and map failures onto exit codes."""

    async def runner() -> T:
        async with get_client() as client:
            return await call(client)

    try:
        return asyncio.run(runner())
    except ForexaError as error:
        raise report_failure(error) from error
    except Exception as error:  # pragma: no cover - safety net
        raise report_failure(ForexaError(f"Unexpected error: {error}")) from error


def _render(ctx: typer.Context, rows: list[Mapping[str, object]], columns: list[str]) -> None:
    with output_stream(ctx) as (formatter, stream):
        formatter.render(rows, stream=stream, columns=columns)


def predict_command(
    ctx: typer.Context,
    symbols: list[str] = typer.Argument(..., help="Currency pairs such as EUR/USD or GBPUSD."),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Abort the whole batch on the first failing pair.",
    ),
) -> None:
    """Generate AI trading predictions for one or more currency pairs."""

    if len(symbols) == 1:
        prediction = _execute(lambda client: client.generate_prediction(symbols[0]))
        _render(ctx, [_prediction_row(prediction)], PREDICTION_COLUMNS)
        return

    outcomes = _execute(lambda client: client.generate_batch_predictions(symbols, fail_fast=fail_fast))
    _render(ctx, [_outcome_row(outcome) for outcome in outcomes], PREDICTION_COLUMNS)
    if outcomes and not any(outcome.ok for outcome in outcomes):
        raise typer.Exit(code=PROVIDER_EXIT_CODE)


def market_data_command(
    ctx: typer.Context,
    symbol: str = typer.Argument(..., help="Currency pair such as EUR/USD."),
) -> None:
    """Show which provider feeds contributed to a comprehensive fetch."""

    composite = _execute(lambda client: client.get_comprehensive_market_data(symbol))
    _render(ctx, _market_data_rows(composite), MARKET_DATA_COLUMNS)


def rate_command(
    ctx: typer.Context,
    from_currency: str = typer.Argument(..., metavar="FROM", help="Source currency code."),
    to_currency: str = typer.Argument(..., metavar="TO", help="Target currency code."),
) -> None:
    """Show the latest conversion rate between two currencies."""

    payload = _execute(lambda client: client.get_forex_rate(from_currency, to_currency))
    _render(ctx, [_rate_row(payload, from_currency, to_currency)], RATE_COLUMNS)


def status_command(ctx: typer.Context) -> None:
    """Show whether the FX market is currently open."""

    payload = _execute(lambda client: client.get_market_status())
    _render(ctx, [_status_row(payload)], STATUS_COLUMNS)


def _prediction_row(prediction: Prediction) -> dict[str, object]:
    return {
        "symbol": prediction.symbol,
        "action": prediction.action.value,
        "confidence": prediction.confidence,
        "risk_level": prediction.risk_level.value,
        "timeframe": prediction.timeframe.value,
        "model_id": prediction.model_id,
        "reasoning": prediction.reasoning,
        "error": None,
    }


def _outcome_row(outcome: PredictionOutcome) -> dict[str, object]:
    if outcome.prediction is not None:
        return {**_prediction_row(outcome.prediction), "symbol": outcome.symbol}
    error = outcome.error
    return {
        "symbol": outcome.symbol,
        "error": f"{error.error_code}: {error.message}" if error else None,
    }


def _market_data_rows(composite: CompositeMarketData) -> list[Mapping[str, object]]:
    return [
        {
            "symbol": composite.symbol,
            "slot": slot.value,
            "provider": result.provider,
            "operation": result.operation,
            "fetched_at": result.fetched_at,
        }
        for slot, result in composite.results.items()
    ]


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _rate_row(payload: Any, from_currency: str, to_currency: str) -> dict[str, object]:
    body = _as_mapping(payload)
    last = _as_mapping(body.get("last"))
    return {
        "from": body.get("from", from_currency.upper()),
        "to": body.get("to", to_currency.upper()),
        "converted": body.get("converted"),
        "bid": last.get("bid"),
        "ask": last.get("ask"),
        "timestamp": last.get("timestamp"),
    }


def _status_row(payload: Any) -> dict[str, object]:
    body = _as_mapping(payload)
    currencies = _as_mapping(body.get("currencies"))
    return {
        "market": body.get("market"),
        "fx": currencies.get("fx"),
        "crypto": currencies.get("crypto"),
        "server_time": body.get("serverTime"),
    }
