"""Stable error codes shared by the exception hierarchy."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """错误代码枚举."""

    GENERAL_ERROR = "GENERAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    PROVIDER_ERROR = "PROVIDER_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"

    AGGREGATION_ERROR = "AGGREGATION_ERROR"
    MODEL_INVOCATION_ERROR = "MODEL_INVOCATION_ERROR"


__all__ = ["ErrorCode"]
