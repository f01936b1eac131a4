"""Prometheus text exposition of the probe metrics registry."""

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from testapp.adapters.probe_metrics.prometheus import PrometheusProbeMetrics
from testapp.core.protocols.metrics_renderer import MetricsRenderer


class PrometheusMetricsRenderer(MetricsRenderer):
    """Serve the collectors of one probe registry to Prometheus scrapers.

    Only the given registry is rendered; the process-wide default registry
    (and its process and platform collectors) stays out of the scrape.
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self._registry = registry

    @classmethod
    def from_metrics(cls, metrics: PrometheusProbeMetrics) -> "PrometheusMetricsRenderer":
        """Renderer for the registry ``metrics`` records into."""
        return cls(metrics.registry)

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def generate(self) -> bytes:
        return generate_latest(self._registry)
