"""
forexa - FX market data aggregation and AI trading predictions.

Example:
    >>> import asyncio
    >>> from forexa import ForexaClient
    >>> async def main():
    ...     async with ForexaClient() as client:
    ...         prediction = await client.generate_prediction("EUR/USD")
    ...         print(prediction.action, prediction.confidence)
    >>> asyncio.run(main())
"""

from forexa.core.client import ForexaClient
from forexa.core.config import ConfigManager, ForexaConfig
from forexa.core.exceptions import (
    AggregationError,
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
    ForexaError,
    ModelInvocationError,
    ProviderError,
    RateLimitError,
)
from forexa.core.models import (
    CompositeMarketData,
    CurrencyPair,
    FeatureSet,
    Prediction,
    PredictionOutcome,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ForexaClient",
    "ConfigManager",
    "ForexaConfig",
    "ForexaError",
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "AggregationError",
    "ModelInvocationError",
    "DataValidationError",
    "ConfigurationError",
    "CompositeMarketData",
    "CurrencyPair",
    "FeatureSet",
    "Prediction",
    "PredictionOutcome",
]
