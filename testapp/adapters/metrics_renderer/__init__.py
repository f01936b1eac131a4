"""Metrics renderer adapters."""

from testapp.adapters.metrics_renderer.fake import FakeMetricsRenderer
from testapp.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer

__all__ = ["PrometheusMetricsRenderer", "FakeMetricsRenderer"]
