"""BigQuery implementation of the WarehouseClient protocol.

Rows are written with a DML ``INSERT`` query job rather than the streaming
API: streamed rows sit in a buffer that ``TRUNCATE TABLE`` cannot touch for
up to ~90 minutes, which would break the insert/read/truncate round trip.
The SDK is blocking, so each job runs in a worker thread.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from google.cloud import bigquery

from testapp.core.protocols.warehouse import WarehouseClient

_SCHEMA = [bigquery.SchemaField("message", "STRING")]
_TABLE_LIFETIME = timedelta(days=365)


class BigQueryWarehouseClient(WarehouseClient):
    """WarehouseClient bound to a single BigQuery dataset/table."""

    def __init__(
        self,
        client: bigquery.Client,
        dataset: str,
        table: str,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._dataset_ref = bigquery.DatasetReference(client.project, dataset)
        self._table_ref = self._dataset_ref.table(table)
        self._timeout = timeout

    @classmethod
    def create(
        cls, dataset: str, table: str, *, project: Optional[str] = None, timeout: float = 10.0
    ) -> "BigQueryWarehouseClient":
        """Build a client using application-default credentials."""
        return cls(bigquery.Client(project=project), dataset, table, timeout=timeout)

    @property
    def table_path(self) -> str:
        ref = self._table_ref
        return f"{ref.project}.{ref.dataset_id}.{ref.table_id}"

    async def create_dataset(self) -> None:
        dataset = bigquery.Dataset(self._dataset_ref)
        await asyncio.to_thread(self._client.create_dataset, dataset, timeout=self._timeout)

    async def create_table(self) -> None:
        table = bigquery.Table(self._table_ref, schema=_SCHEMA)
        table.expires = datetime.now(timezone.utc) + _TABLE_LIFETIME
        await asyncio.to_thread(self._client.create_table, table, timeout=self._timeout)

    async def insert_rows(self, rows: list[dict[str, Any]]) -> None:
        messages = [row["message"] for row in rows]
        await self._run(
            f"INSERT INTO `{self.table_path}` (message) SELECT * FROM UNNEST(@messages)",
            [bigquery.ArrayQueryParameter("messages", "STRING", messages)],
        )

    async def query_rows(self) -> list[dict[str, Any]]:
        return await self._run(f"SELECT message FROM `{self.table_path}`")

    async def truncate_table(self) -> None:
        await self._run(f"TRUNCATE TABLE `{self.table_path}`")

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)

    async def _run(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Submit a query job and wait for it to finish."""

        def _job() -> list[dict[str, Any]]:
            job_config = bigquery.QueryJobConfig(query_parameters=list(params))
            job = self._client.query(sql, job_config=job_config, timeout=self._timeout)
            return [dict(row.items()) for row in job.result(timeout=self._timeout)]

        return await asyncio.to_thread(_job)
