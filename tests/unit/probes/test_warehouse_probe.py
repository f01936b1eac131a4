"""Unit tests for the data warehouse probe."""

import time

import pytest
from google.api_core.exceptions import Conflict, ServiceUnavailable

from testapp.adapters.probe_metrics import FakeProbeMetrics
from testapp.adapters.warehouse import FakeWarehouseClient
from testapp.core.exceptions import ProbeInitError, ProbeOperationError
from testapp.core.retry import RetryConfig
from testapp.probes.warehouse import WarehouseProbe, already_exists


@pytest.fixture
def client():
    return FakeWarehouseClient(table_path="proj.testapp.messages")


@pytest.fixture
def metrics():
    return FakeProbeMetrics()


@pytest.fixture
def probe(client, metrics):
    return WarehouseProbe(client, metrics, RetryConfig(max_duration=0.3, poll_interval=0.05))


def test_already_exists_matches_http_conflict():
    assert already_exists(Conflict("Already Exists")) is True
    assert already_exists(ServiceUnavailable("try later")) is False
    assert already_exists(ValueError("nope")) is False


class TestWarehouseProbeInit:
    @pytest.mark.asyncio
    async def test_creates_dataset_and_table(self, probe, client):
        await probe.init()

        assert client.dataset_exists and client.table_exists
        assert client.calls == ["create_dataset", "create_table"]

    @pytest.mark.asyncio
    async def test_existing_resources_count_as_success_without_waiting(self, client, metrics):
        client.dataset_exists = True
        client.table_exists = True
        probe = WarehouseProbe(client, metrics, RetryConfig(max_duration=5.0, poll_interval=1.0))
        start = time.monotonic()

        await probe.init()

        assert time.monotonic() - start < 0.5
        assert client.calls == ["create_dataset", "create_table"]

    @pytest.mark.asyncio
    async def test_init_twice_is_success(self, probe):
        await probe.init()
        await probe.init()

    @pytest.mark.asyncio
    async def test_persistent_failure_becomes_init_error(self, probe, client):
        client.set_error("create_dataset", ServiceUnavailable("backend unavailable"))

        with pytest.raises(ProbeInitError) as exc_info:
            await probe.init()

        assert "gave up retrying" in str(exc_info.value)
        assert "create_table" not in client.calls


class TestWarehouseProbeRoundTrip:
    @pytest.mark.asyncio
    async def test_round_trip_returns_value_and_empties_table(self, probe, client, metrics):
        await probe.init()

        assert await probe.test("a1b2") == "a1b2"
        assert client.rows == []
        assert metrics.operations() == ["bigquery_insert", "bigquery_read", "bigquery_truncate"]

    @pytest.mark.asyncio
    async def test_insert_failure(self, probe, client, metrics):
        await probe.init()
        client.set_error("insert_rows", ServiceUnavailable("quota exceeded"))

        with pytest.raises(ProbeOperationError, match="unable to insert into proj.testapp"):
            await probe.test("a1b2")

        assert metrics.failures == {"bigquery_insert": 1}
        assert metrics.latencies == []

    @pytest.mark.asyncio
    async def test_leftover_rows_fail_the_read_and_the_table_is_reset(
        self, probe, client, metrics
    ):
        await probe.init()
        client.rows.append({"message": "stale"})

        with pytest.raises(ProbeOperationError, match="expected exactly 1 row, got 2"):
            await probe.test("a1b2")

        assert metrics.failures == {"bigquery_read": 1}
        assert client.rows == []
        assert await probe.test("c3d4") == "c3d4"

    @pytest.mark.asyncio
    async def test_recovers_after_a_failed_truncate(self, probe, client, metrics):
        await probe.init()
        client.set_error("truncate_table", ServiceUnavailable("backend unavailable"))

        with pytest.raises(ProbeOperationError, match="unable to truncate"):
            await probe.test("a1b2")

        client.clear_errors()
        metrics.clear()
        # The leftover row fails one read, which resets the table.
        with pytest.raises(ProbeOperationError, match="expected exactly 1 row, got 2"):
            await probe.test("b0")
        for value in ("b1", "b2", "b3"):
            assert await probe.test(value) == value

        assert client.rows == []
        assert metrics.failures == {"bigquery_read": 1}

    @pytest.mark.asyncio
    async def test_failed_reset_keeps_the_read_error(self, probe, client, metrics):
        await probe.init()
        client.rows.append({"message": "stale"})
        client.set_error("truncate_table", ServiceUnavailable("backend unavailable"))

        with pytest.raises(ProbeOperationError, match="unable to read from"):
            await probe.test("a1b2")

        assert metrics.failures == {"bigquery_read": 1, "bigquery_truncate": 1}

    @pytest.mark.asyncio
    async def test_cleanup_closes_client(self, probe, client):
        await probe.cleanup()

        assert client.closed is True
