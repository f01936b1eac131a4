"""Fake ProbeMetrics for testing.

Records all calls in memory so tests can assert on metrics behaviour
without reaching into prometheus-client internals.
"""

from dataclasses import dataclass


@dataclass
class LatencyRecord:
    """Single observed latency."""

    operation: str
    duration: float


class FakeProbeMetrics:
    """In-memory spy implementing the ProbeMetrics protocol.

    Usage:
        fake = FakeProbeMetrics()
        # … inject into a probe …
        assert fake.failures == {"bucket_write": 1}
        assert fake.latencies == []
    """

    def __init__(self) -> None:
        self.latencies: list[LatencyRecord] = []
        self.failures: dict[str, int] = {}
        self.gauges: dict[str, float] = {}

    def observe_latency(self, operation: str, duration: float) -> None:
        self.latencies.append(LatencyRecord(operation, duration))

    def inc_failure(self, operation: str) -> None:
        self.failures[operation] = self.failures.get(operation, 0) + 1

    def set_gauge(self, name: str, value: float) -> None:
        self.gauges[name] = value

    # -- test helpers --

    def operations(self) -> list[str]:
        """Operation labels of every recorded latency, in order."""
        return [record.operation for record in self.latencies]

    def clear(self) -> None:
        """Reset all recorded state."""
        self.latencies.clear()
        self.failures.clear()
        self.gauges.clear()
