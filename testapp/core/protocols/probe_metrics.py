"""ProbeMetrics protocol for backend probe instrumentation.

Probes receive a metrics sink at construction time instead of reaching for
module-level collectors.  Production uses Prometheus; tests inject a fake
that records calls in memory.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProbeMetrics(Protocol):
    """Protocol for recording probe latencies, failures and app gauges."""

    def observe_latency(self, operation: str, duration: float) -> None:
        """Record a successful backend operation.

        The same ``duration`` feeds both the last-value gauge and the
        latency histogram.

        Args:
            operation: Operation label, e.g. ``bucket_write`` or ``db_read``.
            duration: Elapsed wall-clock time in seconds.
        """
        ...

    def inc_failure(self, operation: str) -> None:
        """Count one failed backend operation."""
        ...

    def set_gauge(self, name: str, value: float) -> None:
        """Set an application-level gauge (start time, deploy time, ...).

        Raises:
            KeyError: ``name`` is not a known gauge.
        """
        ...
