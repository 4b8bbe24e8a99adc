"""Tests for the forexa exception hierarchy."""

import httpx

from forexa.core.exceptions import (
    AggregationError,
    AuthenticationError,
    ConfigurationError,
    DataValidationError,
    ErrorCode,
    ForexaError,
    ModelInvocationError,
    ProviderError,
    RateLimitError,
)


class TestForexaError:
    def test_defaults(self):
        error = ForexaError("boom")

        assert str(error) == "boom"
        assert error.error_code == ErrorCode.GENERAL_ERROR
        assert error.details == {}

    def test_to_payload(self):
        error = DataValidationError("bad symbol", validation_errors={"symbol": "XX"})

        assert error.to_payload() == {
            "error": "DataValidationError",
            "error_code": "VALIDATION_ERROR",
            "message": "bad symbol",
            "details": {"validation_errors": {"symbol": "XX"}},
        }


class TestProviderErrors:
    def test_provider_error_is_attributable(self):
        error = ProviderError("failed", "Polygon.io", "snapshot")

        assert error.provider == "Polygon.io"
        assert error.operation == "snapshot"
        assert error.details == {"provider": "Polygon.io", "operation": "snapshot"}
        assert error.error_code == ErrorCode.PROVIDER_ERROR

    def test_subclasses_carry_their_codes(self):
        auth = AuthenticationError("denied", "Alpha Vantage", "forex_intraday")
        limited = RateLimitError("slow down", "Alpha Vantage", "forex_intraday")

        assert isinstance(auth, ProviderError)
        assert isinstance(limited, ProviderError)
        assert auth.error_code == ErrorCode.AUTHENTICATION_ERROR
        assert limited.error_code == ErrorCode.RATE_LIMIT_ERROR

    def test_cause_is_masked(self):
        cause = httpx.ConnectError("failed for https://x.test/query?apikey=SECRET123&function=FX")
        error = ProviderError("failed", "Alpha Vantage", "forex_intraday", cause=cause)

        assert "SECRET123" not in error.details["cause"]
        assert "apikey=***" in error.details["cause"]
        assert error.cause is cause


class TestAggregationError:
    def test_collects_all_causes(self):
        causes = [
            ProviderError("a", "Alpha Vantage", "forex_intraday"),
            ProviderError("b", "Polygon.io", "news"),
        ]
        error = AggregationError("EUR/USD", causes)

        assert error.causes == causes
        assert error.symbol == "EUR/USD"
        assert error.error_code == ErrorCode.AGGREGATION_ERROR
        assert "All 2 provider calls failed for EUR/USD" in error.message
        assert [cause["operation"] for cause in error.details["causes"]] == ["forex_intraday", "news"]


def test_model_and_configuration_errors():
    model_error = ModelInvocationError("quota", "gemini-test")
    config_error = ConfigurationError("missing key", config_key="credentials.google_api_key")

    assert model_error.model_id == "gemini-test"
    assert model_error.details == {"model_id": "gemini-test"}
    assert model_error.error_code == ErrorCode.MODEL_INVOCATION_ERROR
    assert config_error.details == {"config_key": "credentials.google_api_key"}
    assert config_error.error_code == ErrorCode.CONFIGURATION_ERROR
