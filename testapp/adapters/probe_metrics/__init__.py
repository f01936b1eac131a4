"""Probe metrics adapters."""

from testapp.adapters.probe_metrics.fake import FakeProbeMetrics
from testapp.adapters.probe_metrics.prometheus import PrometheusProbeMetrics

__all__ = ["PrometheusProbeMetrics", "FakeProbeMetrics"]
