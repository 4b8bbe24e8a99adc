"""Pytest configuration for forexa test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from prometheus_client import CollectorRegistry

from forexa.core.monitoring import MetricsCollector, configure_metrics_collector


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--forexa-run-integration",
        action="store_true",
        default=False,
        help="Run forexa integration tests that call the live provider and model APIs.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for forexa tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks forexa tests requiring network access and real API keys",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--forexa-run-integration"):
        return

    forexa_skip_integration = pytest.mark.skip(
        reason="integration tests require --forexa-run-integration",
    )
    for forexa_item in items:
        if "integration" in forexa_item.keywords:
            forexa_item.add_marker(forexa_skip_integration)


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> Iterator[MetricsCollector]:
    """A collector on a private registry, also installed as the process default."""

    collector = MetricsCollector(registry=registry)
    configure_metrics_collector(collector)
    yield collector
    configure_metrics_collector(None)
