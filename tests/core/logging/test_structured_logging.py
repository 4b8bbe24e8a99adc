"""Tests for structured logging with trace propagation."""

from __future__ import annotations

import io
import json

from forexa.core.logging import LogConfig, StructuredLogger, get_logger, mask_secrets


def _read_records(stream: io.StringIO) -> list[dict[str, object]]:
    stream.seek(0)
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


def test_structured_log_contains_trace_and_context() -> None:
    buffer = io.StringIO()
    config = LogConfig(console_stream=buffer, console_output=True, file_output=False)
    logger = StructuredLogger(config)

    with logger.context(trace_id="trace-123", provider="Polygon.io", error_code="PROVIDER_ERROR", request_id="req-42"):
        logger.logger.info("snapshot fetched", symbol="EUR/USD")

    records = _read_records(buffer)
    assert len(records) == 1
    record = records[0]
    assert record["trace_id"] == "trace-123"
    assert record["provider"] == "Polygon.io"
    assert record["error_code"] == "PROVIDER_ERROR"
    assert record["context"]["request_id"] == "req-42"
    assert record["context"]["symbol"] == "EUR/USD"


def test_trace_id_propagates_within_context() -> None:
    buffer = io.StringIO()
    logger = StructuredLogger(LogConfig(console_stream=buffer, console_output=True, file_output=False))

    with logger.context() as trace_id:
        logger.logger.info("first event")
        logger.logger.info("second event")

    logger.logger.info("outside context")

    records = _read_records(buffer)
    assert len(records) == 3
    assert records[0]["trace_id"] == records[1]["trace_id"]
    assert records[0]["trace_id"] == trace_id
    assert records[2]["trace_id"] != records[0]["trace_id"]


def test_module_logger_binds_name() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(console_stream=buffer))

    get_logger("forexa.test").bind(provider="Alpha Vantage").warning("intraday omitted")

    record = _read_records(buffer)[0]
    assert record["level"] == "WARNING"
    assert record["provider"] == "Alpha Vantage"
    assert record["context"]["logger_name"] == "forexa.test"


def test_level_filters_records() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(level="WARNING", console_stream=buffer))

    get_logger("forexa.test").info("hidden")
    get_logger("forexa.test").error("shown")

    assert [record["message"] for record in _read_records(buffer)] == ["shown"]


def test_credentials_are_masked_in_messages() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(console_stream=buffer))

    get_logger("forexa.test").info("GET https://www.alphavantage.co/query?function=FX_INTRADAY&apikey=SECRET")

    message = _read_records(buffer)[0]["message"]
    assert "SECRET" not in message
    assert "apikey=***" in message


def test_mask_secrets_handles_header_and_query_forms() -> None:
    text = "x-goog-api-key: g-secret apiKey=poly-secret&limit=10"

    masked = mask_secrets(text)

    assert "g-secret" not in masked
    assert "poly-secret" not in masked
    assert "limit=10" in masked
