"""How ``GET /metrics`` turns recorded probe metrics into a scrape body.

Probes only ever talk to ``ProbeMetrics``; the endpoint asks a renderer for
the body and the media type to send with it.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsRenderer(Protocol):
    """Produces the ``/metrics`` response."""

    @property
    def content_type(self) -> str:
        """Value of the ``Content-Type`` header on the scrape response."""
        ...

    def generate(self) -> bytes:
        """Snapshot of every probe counter, histogram and application gauge."""
        ...
