"""Relational database probe.

Keeps a single-row ``test`` table: every round trip truncates the table,
inserts the value and selects it back.  The server may still be starting
when the application boots, so ``init`` polls until it accepts connections,
bounded by the retry budget.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Optional

from testapp.core.exceptions import ProbeInitError, RetryError, UnexpectedRowCountError
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.core.protocols.sql import SqlPool
from testapp.core.retry import RetryConfig, retry
from testapp.probes._base import BaseProbe

CREATE_TABLE = "CREATE TABLE IF NOT EXISTS test (timestamp BIGINT, data VARCHAR(255))"
TRUNCATE_TABLE = "TRUNCATE TABLE test"
INSERT_ROW = "INSERT INTO test (timestamp, data) VALUES ($1, $2)"
SELECT_ROWS = "SELECT data FROM test"


class DatabaseProbe(BaseProbe):
    """Round-trips a value through a single-row PostgreSQL table."""

    def __init__(
        self,
        pool_factory: Callable[[], Awaitable[SqlPool]],
        metrics: ProbeMetrics,
        retry_config: RetryConfig,
    ) -> None:
        super().__init__("database", metrics)
        self._pool_factory = pool_factory
        self._retry_config = retry_config
        self._pool: Optional[SqlPool] = None

    async def init(self) -> None:
        try:
            await retry(
                self._connect_and_create_table,
                config=self._retry_config,
                description="connect to database and create table",
                log=self.logger,
            )
        except RetryError as e:
            raise ProbeInitError(self.name, e) from e
        self.logger.info("database connected and test table ready")

    async def _connect_and_create_table(self) -> None:
        if self._pool is None:
            self._pool = await self._pool_factory()
        await self._pool.execute(CREATE_TABLE)

    async def test(self, value: str) -> str:
        pool = self._require_pool()
        await self._write(pool, value)
        return await self._read(pool)

    async def cleanup(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        try:
            await pool.close()
        except Exception as e:
            self.logger.error(f"cleanup database: {e}")

    def _require_pool(self) -> SqlPool:
        if self._pool is None:
            raise RuntimeError("database probe used before init()")
        return self._pool

    async def _write(self, pool: SqlPool, value: str) -> None:
        async def _truncate_and_insert() -> None:
            # Single-row semantics: the read expects to see only this value.
            await pool.execute(TRUNCATE_TABLE)
            await pool.execute(INSERT_ROW, time.time_ns(), value)

        await self._instrumented(
            "db_write", _truncate_and_insert, error="failed inserting to table"
        )

    async def _read(self, pool: SqlPool) -> str:
        async def _select_one() -> str:
            rows = await pool.fetch(SELECT_ROWS)
            if len(rows) != 1:
                raise UnexpectedRowCountError(len(rows))
            return rows[0]["data"]

        return await self._instrumented("db_read", _select_one, error="could not read rows")
