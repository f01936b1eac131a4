"""Canned ``/metrics`` body for endpoint tests."""

from testapp.core.protocols.metrics_renderer import MetricsRenderer


class FakeMetricsRenderer(MetricsRenderer):
    """Returns a fixed body and counts how often the endpoint asked for it."""

    def __init__(
        self, body: bytes = b"# fake metrics\n", content_type: str = "text/plain"
    ) -> None:
        self.body = body
        self._content_type = content_type
        self.generate_calls: int = 0

    @property
    def content_type(self) -> str:
        return self._content_type

    def generate(self) -> bytes:
        self.generate_calls += 1
        return self.body

    def clear(self) -> None:
        """Forget recorded scrapes."""
        self.generate_calls = 0
