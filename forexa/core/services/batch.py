"""批量预测执行."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import Any, Protocol

from forexa.core.exceptions import DataValidationError, ForexaError
from forexa.core.logging import get_logger
from forexa.core.models import ErrorInfo, Prediction, PredictionOutcome

logger = get_logger(__name__)


class Predictor(Protocol):
    async def generate_prediction(self, symbol: str) -> Prediction: ...


def validate_symbols(symbols: Any) -> list[str]:
    """Check a batch payload before any network call is made."""

    if isinstance(symbols, (str, bytes)) or not isinstance(symbols, (list, tuple)):
        raise DataValidationError(
            "symbols must be a list of currency pair strings",
            validation_errors={"symbols": type(symbols).__name__},
        )
    invalid = {str(index): type(item).__name__ for index, item in enumerate(symbols) if not isinstance(item, str)}
    if invalid:
        raise DataValidationError("every symbol must be a string", validation_errors=invalid)
    return list(symbols)


class BatchPredictionRunner:
    """Run one prediction per symbol concurrently, preserving input order.

    By default each slot is isolated: a :class:`ForexaError` for one symbol becomes
    that slot's :class:`ErrorInfo`. With ``fail_fast`` the first error in input
    order is raised instead.
    """

    def __init__(self, predictor: Predictor, concurrency_limit: int | None = None):
        if concurrency_limit is not None and concurrency_limit <= 0:
            raise ValueError("concurrency_limit must be positive")
        self.predictor = predictor
        self.concurrency_limit = concurrency_limit

    async def run(self, symbols: Sequence[str], fail_fast: bool = False) -> list[PredictionOutcome]:
        symbols = validate_symbols(symbols)
        if not symbols:
            return []

        start = time.perf_counter()
        semaphore = asyncio.Semaphore(self.concurrency_limit) if self.concurrency_limit else None

        async def predict(symbol: str) -> Prediction:
            if semaphore is None:
                return await self.predictor.generate_prediction(symbol)
            async with semaphore:
                return await self.predictor.generate_prediction(symbol)

        results = await asyncio.gather(*(predict(symbol) for symbol in symbols), return_exceptions=True)

        outcomes: list[PredictionOutcome] = []
        for symbol, result in zip(symbols, results):
            if isinstance(result, ForexaError):
                if fail_fast:
                    raise result
                logger.bind(error_code=result.error_code.value).warning(
                    f"Prediction for {symbol} failed: {result.message}"
                )
                outcomes.append(PredictionOutcome(symbol=symbol, error=ErrorInfo(**result.to_payload())))
            elif isinstance(result, BaseException):
                raise result
            else:
                outcomes.append(PredictionOutcome(symbol=symbol, prediction=result))

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.info(
            f"Batch of {len(outcomes)} finished in {time.perf_counter() - start:.2f}s "
            f"({len(outcomes) - failed} ok, {failed} failed)"
        )
        return outcomes
