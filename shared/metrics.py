"""
Shared metrics configuration for the Distribution Territory Checker.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram, Info
from typing import Dict, Any, Optional
import time
from contextlib import contextmanager


class MetricsCollector:
    """Centralized metrics collector for services."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._metrics["decisions_total"] = Counter(
            "decisions_total",
            "Total permission decisions",
            ["decision"],
            registry=self.registry
        )

        self._metrics["evaluation_failures_total"] = Counter(
            "evaluation_failures_total",
            "Total (distributor, city) pairs that could not be evaluated",
            ["error_type"],
            registry=self.registry
        )

        self._metrics["evaluation_duration_seconds"] = Histogram(
            "evaluation_duration_seconds",
            "Permission evaluation duration in seconds",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_decision(self, decision: str):
        """Record one permission decision."""
        self._metrics["decisions_total"].labels(decision=decision).inc()

    def record_failure(self, error_type: str):
        """Record a pair that failed to evaluate."""
        self._metrics["evaluation_failures_total"].labels(error_type=error_type).inc()

    @contextmanager
    def time_operation(self, operation_name: str, **labels):
        """Context manager to time an operation.

        Only blocks that complete are observed; a raising block is not timed.
        """
        start_time = time.time()
        yield
        duration = time.time() - start_time
        if operation_name in self._metrics:
            metric = self._metrics[operation_name]
            if labels:
                metric = metric.labels(**labels)
            metric.observe(duration)

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Read back the current value of a sample from the registry."""
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
