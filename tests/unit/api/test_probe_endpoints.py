"""Tests for the probe test routes and the application lifespan."""

import pytest
from fastapi.testclient import TestClient

from testapp.adapters.metrics_renderer import FakeMetricsRenderer, PrometheusMetricsRenderer
from testapp.adapters.object_store import FakeObjectStore
from testapp.adapters.probe_metrics import FakeProbeMetrics, PrometheusProbeMetrics
from testapp.core.config import Settings
from testapp.core.exceptions import ProbeInitError
from testapp.main import create_app
from testapp.probes.bucket import BucketProbe
from testapp.probes.registry import ProbeCandidate


def _candidate(probe):
    async def factory():
        return probe

    return ProbeCandidate(probe.name, factory)


class _BrokenProbe:
    name = "database"

    def __init__(self):
        self.cleaned_up = False

    async def init(self):
        raise ProbeInitError(self.name, ConnectionRefusedError("connection refused"))

    async def test(self, value):
        return value

    async def cleanup(self):
        self.cleaned_up = True


@pytest.fixture
def settings():
    return Settings(_env_file=None, VERSION="1.2.3", REVISION="abc123", PROBE_TEST_TIMEOUT=1.0)


@pytest.fixture
def metrics():
    return FakeProbeMetrics()


@pytest.fixture
def store():
    return FakeObjectStore(bucket="team-bucket")


@pytest.fixture
def app(settings, metrics, store):
    return create_app(
        settings,
        metrics=metrics,
        renderer=FakeMetricsRenderer(),
        candidates=[_candidate(BucketProbe(store, "test", metrics))],
    )


class TestProbeRoute:
    def test_success_returns_empty_200(self, app, store, metrics):
        with TestClient(app) as client:
            response = client.get("/bucket/test")

        assert response.status_code == 200
        assert response.text == ""
        assert len(store.objects["test"]) == 4
        assert metrics.operations() == ["bucket_write", "bucket_read"]

    def test_mismatch_returns_500_with_expected_and_observed(self, app, store):
        store.set_read_override(b"zzzz")

        with TestClient(app) as client:
            response = client.get("/bucket/test")

        assert response.status_code == 500
        assert response.text.startswith("bucket test: data mismatch, expected: ")
        assert response.text.endswith(" got: zzzz")
        expected = response.text.split("expected: ")[1].split(" got:")[0]
        assert store.objects["test"].decode() == expected

    def test_backend_error_returns_500_and_counts_failure(self, app, store, metrics):
        store.set_error("write", ConnectionError("refused"))

        with TestClient(app) as client:
            response = client.get("/bucket/test")

        assert response.status_code == 500
        assert response.text == "bucket test: error: unable to write to bucket team-bucket: refused"
        assert metrics.failures == {"bucket_write": 1}

    def test_unregistered_probe_has_no_route(self, settings, metrics, store):
        broken = _BrokenProbe()
        app = create_app(
            settings,
            metrics=metrics,
            renderer=FakeMetricsRenderer(),
            candidates=[_candidate(broken), _candidate(BucketProbe(store, "test", metrics))],
        )

        with TestClient(app) as client:
            assert client.get("/database/test").status_code == 404
            assert client.get("/bucket/test").status_code == 200

        assert broken.cleaned_up is True


class TestLifespan:
    def test_probes_are_cleaned_up_on_shutdown(self, app, store):
        with TestClient(app):
            assert store.closed is False

        assert store.closed is True
        assert app.state.probe_registry.cancelled.is_set()

    def test_start_metrics_are_recorded(self, metrics):
        settings = Settings(_env_file=None, DEPLOY_START_TIMESTAMP=1_000.0)
        app = create_app(settings, metrics=metrics, renderer=FakeMetricsRenderer(), candidates=[])

        with TestClient(app):
            pass

        start = metrics.gauges["start_timestamp"]
        assert metrics.gauges["deploy_timestamp"] == 1_000.0
        assert metrics.gauges["lead_time_seconds"] == pytest.approx(start - 1_000.0)

    def test_lead_time_is_skipped_without_deploy_timestamp(self, settings, metrics):
        app = create_app(settings, metrics=metrics, renderer=FakeMetricsRenderer(), candidates=[])

        with TestClient(app):
            pass

        assert set(metrics.gauges) == {"start_timestamp"}

    def test_custom_metrics_require_a_renderer(self, settings, metrics):
        with pytest.raises(ValueError):
            create_app(settings, metrics=metrics, candidates=[])


class TestPrometheusExposition:
    def test_metrics_endpoint_reports_probe_operations(self, settings, store):
        probe_metrics = PrometheusProbeMetrics()
        app = create_app(
            settings,
            metrics=probe_metrics,
            renderer=PrometheusMetricsRenderer.from_metrics(probe_metrics),
            candidates=[_candidate(BucketProbe(store, "test", probe_metrics))],
        )

        with TestClient(app) as client:
            client.get("/bucket/test")
            response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        body = response.text
        assert 'testapp_probe_latency_seconds_count{operation="bucket_write"} 1.0' in body
        assert 'testapp_probe_last_latency_seconds{operation="bucket_read"}' in body
        assert "testapp_start_timestamp" in body

    def test_default_app_exposes_its_own_registry(self, settings):
        app = create_app(settings, candidates=[])

        with TestClient(app) as client:
            body = client.get("/metrics").text

        assert "testapp_start_timestamp" in body
        assert "testapp_probe_failures_total" in body
