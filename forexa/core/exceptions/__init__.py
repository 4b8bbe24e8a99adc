"""Exception handling module."""

from forexa.core.exceptions.base import (
    AggregationError,
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
    ForexaError,
    ModelInvocationError,
    ProviderError,
    RateLimitError,
)
from forexa.core.exceptions.codes import ErrorCode

__all__ = [
    "ForexaError",
    "ProviderError",
    "AuthenticationError",
    "RateLimitError",
    "AggregationError",
    "ModelInvocationError",
    "DataValidationError",
    "ConfigurationError",
    "ErrorCode",
]
