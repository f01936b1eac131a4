"""Prometheus implementation of the ProbeMetrics protocol.

Creates a dedicated CollectorRegistry (unless one is supplied) so probe
metrics are isolated from the default global registry and every test can
build its own instance.
"""

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from testapp.core.protocols.probe_metrics import ProbeMetrics

# Round trips to managed services range from sub-millisecond (local
# PostgreSQL) to several seconds (warehouse jobs).
_LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

_APP_GAUGES = {
    "start_timestamp": "Unix time at which the application started",
    "deploy_timestamp": "Unix time at which the deploy of this application was triggered",
    "lead_time_seconds": "Seconds from triggering the deploy until the application started",
}


class PrometheusProbeMetrics(ProbeMetrics):
    """Prometheus-backed probe metrics collection."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

        self._latency = Histogram(
            "testapp_probe_latency_seconds",
            "Latency of successful backend operations in seconds",
            ["operation"],
            buckets=_LATENCY_BUCKETS,
            registry=self._registry,
        )

        self._last_latency = Gauge(
            "testapp_probe_last_latency_seconds",
            "Latency of the most recent successful backend operation in seconds",
            ["operation"],
            registry=self._registry,
        )

        self._failures = Counter(
            "testapp_probe_failures_total",
            "Total failed backend operations",
            ["operation"],
            registry=self._registry,
        )

        self._gauges = {
            name: Gauge(f"testapp_{name}", help_text, registry=self._registry)
            for name, help_text in _APP_GAUGES.items()
        }

    @property
    def registry(self) -> CollectorRegistry:
        """Registry holding every collector created by this adapter."""
        return self._registry

    # -- ProbeMetrics protocol methods --

    def observe_latency(self, operation: str, duration: float) -> None:
        self._latency.labels(operation=operation).observe(duration)
        self._last_latency.labels(operation=operation).set(duration)

    def inc_failure(self, operation: str) -> None:
        self._failures.labels(operation=operation).inc()

    def set_gauge(self, name: str, value: float) -> None:
        self._gauges[name].set(value)
