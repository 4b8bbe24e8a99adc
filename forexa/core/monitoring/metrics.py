"""Prometheus metrics helpers for forexa services."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


@dataclass
class _ProviderStats:
    """Internal container tracking provider level success and failure counts."""

    total: int = 0
    failures: int = 0


class MetricsCollector:
    """Collects and exposes Prometheus metrics for provider and model calls."""

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.provider_call_latency_seconds = Histogram(
            "forexa_provider_call_latency_seconds",
            "Latency distribution for upstream market-data provider calls.",
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
            registry=self.registry,
        )
        self.provider_calls_total = Counter(
            "forexa_provider_calls_total",
            "Total count of upstream market-data provider calls.",
            ("provider", "operation"),
            registry=self.registry,
        )
        self.provider_failures_total = Counter(
            "forexa_provider_failures_total",
            "Total count of failed upstream market-data provider calls.",
            ("provider", "operation"),
            registry=self.registry,
        )
        self.provider_error_rate = Gauge(
            "forexa_provider_error_rate",
            "Error rate for upstream market-data providers (0-1 range).",
            ("provider",),
            registry=self.registry,
        )
        self.model_invocations_total = Counter(
            "forexa_model_invocations_total",
            "Generative model invocations grouped by outcome.",
            ("outcome",),
            registry=self.registry,
        )
        self.prediction_fallbacks_total = Counter(
            "forexa_prediction_fallbacks_total",
            "Predictions that fell back to the default verdict, grouped by reason.",
            ("reason",),
            registry=self.registry,
        )
        self._provider_stats: DefaultDict[str, _ProviderStats] = defaultdict(_ProviderStats)

    def observe_provider_call(
        self,
        provider: str,
        operation: str,
        latency_seconds: float,
        *,
        success: bool = True,
    ) -> None:
        """Record a provider call execution."""

        self.provider_call_latency_seconds.observe(latency_seconds)
        stats = self._provider_stats[provider]
        stats.total += 1
        self.provider_calls_total.labels(provider=provider, operation=operation).inc()
        if not success:
            stats.failures += 1
            self.provider_failures_total.labels(provider=provider, operation=operation).inc()
        self.provider_error_rate.labels(provider=provider).set(stats.failures / stats.total)

    def record_model_invocation(self, outcome: str) -> None:
        label = outcome if outcome in _ALLOWED_MODEL_OUTCOMES else "__other__"
        self.model_invocations_total.labels(outcome=label).inc()

    def record_fallback(self, reason: str) -> None:
        label = reason if reason in _ALLOWED_FALLBACK_REASONS else "__other__"
        self.prediction_fallbacks_total.labels(reason=label).inc()

    def render(self) -> bytes:
        """Render metrics in Prometheus exposition format."""

        return generate_latest(self.registry)


_DEFAULT_COLLECTOR: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the process-wide metrics collector instance."""

    global _DEFAULT_COLLECTOR
    if _DEFAULT_COLLECTOR is None:
        _DEFAULT_COLLECTOR = MetricsCollector()
    return _DEFAULT_COLLECTOR


def configure_metrics_collector(collector: MetricsCollector | None) -> None:
    """Override the process-wide metrics collector for application wiring or tests."""

    global _DEFAULT_COLLECTOR
    _DEFAULT_COLLECTOR = collector


_ALLOWED_MODEL_OUTCOMES = {"success", "failure"}
_ALLOWED_FALLBACK_REASONS = {"no_json", "decode_error"}
