"""Builds probe candidates from settings.

A backend becomes a candidate only when its required settings are present;
everything else is skipped silently.  Construction itself is deferred to
the registry so that a failing constructor (missing credentials, bad TLS
files) is handled like any other init failure.
"""

import asyncio
import functools
from typing import Optional

from testapp.adapters.broker.kafka import KafkaBrokerConnector
from testapp.adapters.object_store.gcs import GoogleCloudObjectStore
from testapp.adapters.object_store.s3 import S3ObjectStore
from testapp.adapters.sql.postgres import create_postgres_pool
from testapp.adapters.warehouse.bigquery import BigQueryWarehouseClient
from testapp.core.config import Settings
from testapp.core.exceptions import ProbeConfigurationError
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.core.retry import RetryConfig
from testapp.probes.broker import BrokerProbe
from testapp.probes.bucket import BucketProbe
from testapp.probes.database import DatabaseProbe
from testapp.probes.registry import ProbeCandidate
from testapp.probes.warehouse import WarehouseProbe


def _require(**values: Optional[str]) -> None:
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ProbeConfigurationError(f"missing required settings: {', '.join(missing)}")


async def create_bucket_probe(settings: Settings, metrics: ProbeMetrics) -> BucketProbe:
    _require(BUCKET_NAME=settings.BUCKET_NAME)
    # Credential discovery can hit the metadata server.
    store = await asyncio.to_thread(
        GoogleCloudObjectStore.create,
        settings.BUCKET_NAME,
        project=settings.GCP_TEAM_PROJECT_ID,
        timeout=settings.PROBE_TEST_TIMEOUT,
    )
    return BucketProbe(store, settings.BUCKET_OBJECT_NAME, metrics, name="bucket")


async def create_ceph_probe(settings: Settings, metrics: ProbeMetrics) -> BucketProbe:
    _require(RGW_HOST=settings.RGW_HOST, RGW_BUCKET_NAME=settings.RGW_BUCKET_NAME)
    endpoint = settings.RGW_HOST
    if "://" not in endpoint:
        endpoint = f"https://{endpoint}"
    store = S3ObjectStore(
        endpoint_url=endpoint,
        bucket=settings.RGW_BUCKET_NAME,
        region=settings.RGW_REGION,
        access_key=settings.RGW_ACCESS_KEY,
        secret_key=settings.RGW_SECRET_KEY,
        timeout=settings.PROBE_TEST_TIMEOUT,
    )
    return BucketProbe(store, settings.RGW_OBJECT_NAME, metrics, name="ceph")


async def create_database_probe(
    settings: Settings, metrics: ProbeMetrics, cancelled: asyncio.Event
) -> DatabaseProbe:
    _require(DB_HOST=settings.DB_HOST, DB_PASSWORD=settings.DB_PASSWORD)
    pool_factory = functools.partial(
        create_postgres_pool,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        user=settings.DB_USER,
        password=settings.DB_PASSWORD,
        database=settings.DB_NAME,
        timeout=settings.PROBE_TEST_TIMEOUT,
    )
    retry_config = RetryConfig(
        max_duration=settings.DB_MAX_RETRY_SECONDS,
        poll_interval=settings.DB_RETRY_INTERVAL_SECONDS,
        cancelled=cancelled,
    )
    return DatabaseProbe(pool_factory, metrics, retry_config)


async def create_warehouse_probe(
    settings: Settings, metrics: ProbeMetrics, cancelled: asyncio.Event
) -> WarehouseProbe:
    _require(BIGQUERY_DATASET=settings.BIGQUERY_DATASET, BIGQUERY_TABLE=settings.BIGQUERY_TABLE)
    client = await asyncio.to_thread(
        BigQueryWarehouseClient.create,
        settings.BIGQUERY_DATASET,
        settings.BIGQUERY_TABLE,
        project=settings.BIGQUERY_PROJECT_ID or settings.GCP_TEAM_PROJECT_ID,
        timeout=settings.PROBE_TEST_TIMEOUT,
    )
    return WarehouseProbe(client, metrics, init_retry_config(settings, cancelled))


async def create_broker_probe(settings: Settings, metrics: ProbeMetrics) -> BrokerProbe:
    _require(KAFKA_BROKERS=settings.KAFKA_BROKERS)
    connector = KafkaBrokerConnector.from_files(
        ca_path=settings.KAFKA_CA_PATH,
        certificate_path=settings.KAFKA_CERTIFICATE_PATH,
        private_key_path=settings.KAFKA_PRIVATE_KEY_PATH,
        request_timeout_ms=int(settings.PROBE_TEST_TIMEOUT * 1000),
    )
    return BrokerProbe(connector, settings.kafka_broker_list, metrics)


def init_retry_config(settings: Settings, cancelled: Optional[asyncio.Event]) -> RetryConfig:
    """Retry budget for probes without a backend-specific one."""
    return RetryConfig(
        max_duration=settings.INIT_MAX_RETRY_SECONDS,
        poll_interval=settings.INIT_RETRY_INTERVAL_SECONDS,
        cancelled=cancelled,
    )


def build_candidates(
    settings: Settings, metrics: ProbeMetrics, cancelled: asyncio.Event
) -> list[ProbeCandidate]:
    """Return a candidate for every backend whose required settings are present.

    Order is fixed: bucket, ceph, database, bigquery, kafka.
    """
    candidates: list[ProbeCandidate] = []

    if settings.BUCKET_NAME:
        candidates.append(
            ProbeCandidate("bucket", functools.partial(create_bucket_probe, settings, metrics))
        )
    if settings.RGW_HOST and settings.RGW_BUCKET_NAME:
        candidates.append(
            ProbeCandidate("ceph", functools.partial(create_ceph_probe, settings, metrics))
        )
    if settings.DB_HOST and settings.DB_PASSWORD:
        candidates.append(
            ProbeCandidate(
                "database",
                functools.partial(create_database_probe, settings, metrics, cancelled),
            )
        )
    if settings.BIGQUERY_DATASET and settings.BIGQUERY_TABLE:
        candidates.append(
            ProbeCandidate(
                "bigquery",
                functools.partial(create_warehouse_probe, settings, metrics, cancelled),
            )
        )
    if settings.kafka_broker_list:
        candidates.append(
            ProbeCandidate("kafka", functools.partial(create_broker_probe, settings, metrics))
        )

    return candidates
