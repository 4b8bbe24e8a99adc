"""forexa核心异常类."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from forexa.core.exceptions.codes import ErrorCode
from forexa.core.logging import mask_secrets


class ForexaError(Exception):
    """forexa基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {
            "error": self.__class__.__name__,
            "error_code": self.error_code.value,
            "message": self.message,
            "details": dict(self.details),
        }


class ProviderError(ForexaError):
    """A single upstream provider call failed.

    Always attributable to exactly one ``provider``/``operation`` pair; ``cause``
    holds the underlying exception when there is one.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        operation: str,
        cause: BaseException | None = None,
        error_code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super_details = {"provider": provider, "operation": operation, **(details or {})}
        if cause is not None:
            super_details.setdefault("cause", mask_secrets(f"{type(cause).__name__}: {cause}"))
        super().__init__(message, error_code, super_details)
        self.provider = provider
        self.operation = operation
        self.cause = cause


class AuthenticationError(ProviderError):
    """认证异常."""

    def __init__(
        self,
        message: str,
        provider: str,
        operation: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider, operation, cause, ErrorCode.AUTHENTICATION_ERROR, details)


class RateLimitError(ProviderError):
    """速率限制异常."""

    def __init__(
        self,
        message: str,
        provider: str,
        operation: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider, operation, cause, ErrorCode.RATE_LIMIT_ERROR, details)


class AggregationError(ForexaError):
    """Every constituent call of a comprehensive fetch failed."""

    def __init__(self, symbol: str, causes: Sequence[ProviderError]):
        self.symbol = symbol
        self.causes = list(causes)
        failed = ", ".join(f"{cause.provider}.{cause.operation}" for cause in self.causes)
        super().__init__(
            f"All {len(self.causes)} provider calls failed for {symbol}: {failed}",
            ErrorCode.AGGREGATION_ERROR,
            {
                "symbol": symbol,
                "causes": [
                    {"provider": cause.provider, "operation": cause.operation, "message": cause.message}
                    for cause in self.causes
                ],
            },
        )


class ModelInvocationError(ForexaError):
    """The generative model call itself failed (not a parsing issue)."""

    def __init__(
        self,
        message: str,
        model_id: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = {"model_id": model_id, **(details or {})}
        if cause is not None:
            super_details.setdefault("cause", mask_secrets(f"{type(cause).__name__}: {cause}"))
        super().__init__(message, ErrorCode.MODEL_INVOCATION_ERROR, super_details)
        self.model_id = model_id
        self.cause = cause


class DataValidationError(ForexaError):
    """数据验证异常."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR, super_details)
        self.validation_errors = validation_errors or {}


class ConfigurationError(ForexaError):
    """配置异常."""

    def __init__(self, message: str, config_key: str | None = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, {"config_key": config_key} if config_key else None)
        self.config_key = config_key
