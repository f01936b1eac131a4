"""Fake WarehouseClient for testing.

Behaves like a single-table warehouse: creating an existing dataset or
table raises ``google.api_core.exceptions.Conflict`` (HTTP 409), the same
error the real client raises.
"""

from typing import Any

from google.api_core.exceptions import Conflict


class FakeWarehouseClient:
    """In-memory WarehouseClient."""

    def __init__(self, table_path: str = "project.dataset.table") -> None:
        self._table_path = table_path
        self.dataset_exists = False
        self.table_exists = False
        self.rows: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.closed = False
        self._errors: dict[str, Exception] = {}

    @property
    def table_path(self) -> str:
        return self._table_path

    def _record(self, method: str) -> None:
        self.calls.append(method)
        error = self._errors.get(method)
        if error is not None:
            raise error

    async def create_dataset(self) -> None:
        self._record("create_dataset")
        if self.dataset_exists:
            raise Conflict("Already Exists: Dataset")
        self.dataset_exists = True

    async def create_table(self) -> None:
        self._record("create_table")
        if self.table_exists:
            raise Conflict(f"Already Exists: Table {self._table_path}")
        self.table_exists = True

    async def insert_rows(self, rows: list[dict[str, Any]]) -> None:
        self._record("insert_rows")
        self.rows.extend(dict(row) for row in rows)

    async def query_rows(self) -> list[dict[str, Any]]:
        self._record("query_rows")
        return [dict(row) for row in self.rows]

    async def truncate_table(self) -> None:
        self._record("truncate_table")
        self.rows.clear()

    async def close(self) -> None:
        self._record("close")
        self.closed = True

    # -- test helpers --

    def set_error(self, method: str, error: Exception) -> None:
        """Make ``method`` raise ``error`` on every call."""
        self._errors[method] = error

    def clear_errors(self) -> None:
        """Remove every injected error."""
        self._errors.clear()
