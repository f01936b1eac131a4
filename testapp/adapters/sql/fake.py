"""Fake SqlPool for testing.

Understands only the handful of statements the database probe issues
against its single ``test`` table.
"""

from typing import Any, Optional


def _kind(query: str) -> str:
    words = query.split()
    return words[0].lower() if words else ""


class FakeSqlPool:
    """In-memory stand-in for an asyncpg pool.

    Usage:
        pool = FakeSqlPool()
        pool.set_error("insert", ConnectionResetError("gone"))
        pool.seed_rows(["a", "b"])
    """

    def __init__(self) -> None:
        self.table_created = False
        self.rows: list[dict[str, Any]] = []
        self.statements: list[str] = []
        self.closed = False
        self._errors: dict[str, Exception] = {}

    def _record(self, query: str) -> str:
        kind = _kind(query)
        self.statements.append(kind)
        error = self._errors.get(kind)
        if error is not None:
            raise error
        return kind

    async def execute(self, query: str, *args: Any) -> str:
        kind = self._record(query)
        if kind == "create":
            self.table_created = True
            return "CREATE TABLE"
        if kind == "truncate":
            self.rows.clear()
            return "TRUNCATE TABLE"
        if kind == "insert":
            timestamp, data = args
            self.rows.append({"timestamp": timestamp, "data": data})
            return "INSERT 0 1"
        raise NotImplementedError(f"FakeSqlPool cannot execute: {query}")

    async def fetch(self, query: str, *args: Any) -> list[dict[str, Any]]:
        kind = self._record(query)
        if kind == "select":
            return [{"data": row["data"]} for row in self.rows]
        raise NotImplementedError(f"FakeSqlPool cannot fetch: {query}")

    async def close(self) -> None:
        self.closed = True

    # -- test helpers --

    def set_error(self, kind: str, error: Exception) -> None:
        """Make statements starting with ``kind`` (e.g. ``insert``) raise ``error``."""
        self._errors[kind] = error

    def seed_rows(self, values: list[str]) -> None:
        """Replace the table contents with one row per value."""
        self.rows = [{"timestamp": i, "data": value} for i, value in enumerate(values)]


class FakePoolFactory:
    """Async pool factory that fails a configurable number of times.

    Pass ``failures=None`` to fail forever (an unreachable server).
    """

    def __init__(
        self,
        pool: Optional[FakeSqlPool] = None,
        *,
        failures: Optional[int] = 0,
        error: Optional[Exception] = None,
    ) -> None:
        self.pool = pool or FakeSqlPool()
        self.failures = failures
        self.error = error or ConnectionRefusedError("connection refused")
        self.calls = 0

    async def __call__(self) -> FakeSqlPool:
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise self.error
        return self.pool
