"""Unit tests for the vendor SDK adapters, with the SDK clients mocked out."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from testapp.adapters.broker.kafka import KafkaBrokerConnection
from testapp.adapters.object_store import FakeObjectStore, GoogleCloudObjectStore, S3ObjectStore
from testapp.adapters.warehouse import BigQueryWarehouseClient


class TestGoogleCloudObjectStore:
    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.list_buckets.return_value = iter(["a", "b"])
        return client

    @pytest.mark.asyncio
    async def test_check_lists_project_buckets(self, client):
        store = GoogleCloudObjectStore(client, "team-bucket", project="team-project", timeout=5.0)

        await store.check()

        client.list_buckets.assert_called_once_with(project="team-project", timeout=5.0)

    @pytest.mark.asyncio
    async def test_write_disables_caching(self, client):
        store = GoogleCloudObjectStore(client, "team-bucket", timeout=5.0)
        blob = client.bucket.return_value.blob.return_value

        await store.write("test", b"a1b2")

        client.bucket.assert_called_once_with("team-bucket")
        assert blob.cache_control == "no-store"
        blob.upload_from_string.assert_called_once_with(b"a1b2", timeout=5.0)

    @pytest.mark.asyncio
    async def test_read(self, client):
        store = GoogleCloudObjectStore(client, "team-bucket", timeout=5.0)
        client.bucket.return_value.blob.return_value.download_as_bytes.return_value = b"a1b2"

        assert await store.read("test") == b"a1b2"


class TestS3ObjectStore:
    @pytest.fixture
    def store(self):
        store = S3ObjectStore(
            endpoint_url="https://rgw.example.internal",
            bucket="team-rgw",
            region="us-east-1",
            access_key="key",
            secret_key="secret",
        )
        store._client = AsyncMock()
        return store

    @pytest.mark.asyncio
    async def test_check_heads_bucket(self, store):
        await store.check()

        store._client.head_bucket.assert_awaited_once_with(Bucket="team-rgw")

    @pytest.mark.asyncio
    async def test_write_puts_object(self, store):
        await store.write("test", b"a1b2")

        store._client.put_object.assert_awaited_once_with(
            Bucket="team-rgw", Key="test", Body=b"a1b2"
        )

    @pytest.mark.asyncio
    async def test_read_streams_body(self, store):
        stream = AsyncMock()
        stream.read.return_value = b"a1b2"
        body = MagicMock()
        body.__aenter__ = AsyncMock(return_value=stream)
        body.__aexit__ = AsyncMock(return_value=False)
        store._client.get_object.return_value = {"Body": body}

        assert await store.read("test") == b"a1b2"

    @pytest.mark.asyncio
    async def test_close_releases_client(self, store):
        await store.close()

        assert store._client is None


class TestBigQueryWarehouseClient:
    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.project = "team-project"
        return client

    @pytest.fixture
    def warehouse(self, client):
        return BigQueryWarehouseClient(client, "testapp", "messages", timeout=5.0)

    def test_table_path(self, warehouse):
        assert warehouse.table_path == "team-project.testapp.messages"

    @pytest.mark.asyncio
    async def test_insert_uses_parameterized_dml(self, warehouse, client):
        await warehouse.insert_rows([{"message": "a1b2"}])

        sql = client.query.call_args.args[0]
        job_config = client.query.call_args.kwargs["job_config"]
        assert sql.startswith("INSERT INTO `team-project.testapp.messages`")
        assert job_config.query_parameters[0].values == ["a1b2"]

    @pytest.mark.asyncio
    async def test_query_rows_returns_dicts(self, warehouse, client):
        client.query.return_value.result.return_value = [{"message": "a1b2"}]

        assert await warehouse.query_rows() == [{"message": "a1b2"}]
        client.query.return_value.result.assert_called_once_with(timeout=5.0)

    @pytest.mark.asyncio
    async def test_truncate(self, warehouse, client):
        await warehouse.truncate_table()

        assert client.query.call_args.args[0] == "TRUNCATE TABLE `team-project.testapp.messages`"

    @pytest.mark.asyncio
    async def test_create_table_sets_expiry(self, warehouse, client):
        await warehouse.create_table()

        table = client.create_table.call_args.args[0]
        assert table.expires is not None
        assert [field.name for field in table.schema] == ["message"]


class TestKafkaBrokerConnection:
    @pytest.mark.asyncio
    async def test_connected_until_closed(self):
        client = MagicMock()
        client.cluster.brokers.return_value = {1}
        client.close = AsyncMock()
        connection = KafkaBrokerConnection("broker-1:9092", client)

        assert connection.connected() is True

        await connection.close()

        assert connection.connected() is False
        client.close.assert_awaited_once()

    def test_no_known_brokers_means_not_connected(self):
        client = MagicMock()
        client.cluster.brokers.return_value = set()

        assert KafkaBrokerConnection("broker-1:9092", client).connected() is False


class TestFakeObjectStore:
    @pytest.mark.asyncio
    async def test_missing_object(self):
        with pytest.raises(FileNotFoundError):
            await FakeObjectStore().read("nope")

    @pytest.mark.asyncio
    async def test_clear_resets_state(self):
        store = FakeObjectStore()
        await store.write("test", b"x")
        store.set_error("read", RuntimeError("boom"))

        store.clear()

        assert store.objects == {}
        assert store.calls == []
        assert await store.write("test", b"y") is None
