"""Data warehouse probe (BigQuery).

Round trip: insert one row, read the table back, then truncate it so the
next request starts from an empty table.  The truncate also runs when the
read fails, so a stale row or an earlier failed truncate cannot wedge the
probe.
"""

from testapp.core.exceptions import (
    ProbeInitError,
    ProbeOperationError,
    RetryError,
    UnexpectedRowCountError,
)
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.core.protocols.warehouse import WarehouseClient
from testapp.core.retry import RetryConfig, retry
from testapp.probes._base import BaseProbe

_CONFLICT = 409


def already_exists(exc: Exception) -> bool:
    """Whether ``exc`` is the provider's "already exists" (HTTP 409) error."""
    return getattr(exc, "code", None) == _CONFLICT


class WarehouseProbe(BaseProbe):
    """Round-trips a value through a single-column warehouse table."""

    def __init__(
        self,
        client: WarehouseClient,
        metrics: ProbeMetrics,
        retry_config: RetryConfig,
    ) -> None:
        super().__init__("bigquery", metrics)
        self._client = client
        self._retry_config = retry_config

    async def init(self) -> None:
        try:
            await retry(
                self._client.create_dataset,
                config=self._retry_config,
                acceptable=already_exists,
                description="create dataset",
                log=self.logger,
            )
            await retry(
                self._client.create_table,
                config=self._retry_config,
                acceptable=already_exists,
                description=f"create table {self._client.table_path}",
                log=self.logger,
            )
        except RetryError as e:
            raise ProbeInitError(self.name, e) from e
        self.logger.info(f"table {self._client.table_path} ready")

    async def test(self, value: str) -> str:
        await self._instrumented(
            "bigquery_insert",
            lambda: self._client.insert_rows([{"message": value}]),
            error=f"unable to insert into {self._client.table_path}",
        )
        try:
            result = await self._instrumented(
                "bigquery_read",
                self._read_single_message,
                error=f"unable to read from {self._client.table_path}",
            )
        except ProbeOperationError:
            # Leftover rows would fail every later read; reset the table anyway.
            await self._reset_after_failed_read()
            raise
        await self._truncate()
        return result

    async def cleanup(self) -> None:
        try:
            await self._client.close()
        except Exception as e:
            self.logger.error(f"cleanup bigquery: {e}")

    async def _truncate(self) -> None:
        await self._instrumented(
            "bigquery_truncate",
            self._client.truncate_table,
            error=f"unable to truncate {self._client.table_path}",
        )

    async def _reset_after_failed_read(self) -> None:
        try:
            await self._truncate()
        except ProbeOperationError as e:
            self.logger.warning(f"could not reset table after failed read: {e}")

    async def _read_single_message(self) -> str:
        rows = await self._client.query_rows()
        if len(rows) != 1:
            raise UnexpectedRowCountError(len(rows))
        return rows[0]["message"]
