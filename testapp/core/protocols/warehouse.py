"""WarehouseClient protocol for the data-warehouse probe.

Every method is one asynchronous warehouse job that waits for completion.
Creation calls raise an error carrying ``code == 409`` when the resource
already exists; the probe treats that as success.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class WarehouseClient(Protocol):
    """Access to one dataset/table pair in an analytics warehouse."""

    @property
    def table_path(self) -> str:
        """Fully qualified table identifier, for logs and errors."""
        ...

    async def create_dataset(self) -> None:
        """Create the dataset."""
        ...

    async def create_table(self) -> None:
        """Create the table with a single ``message STRING`` column."""
        ...

    async def insert_rows(self, rows: list[dict[str, Any]]) -> None:
        """Insert rows and wait until they are visible to queries."""
        ...

    async def query_rows(self) -> list[dict[str, Any]]:
        """Return every row in the table."""
        ...

    async def truncate_table(self) -> None:
        """Delete every row in the table."""
        ...

    async def close(self) -> None:
        """Release the underlying client."""
        ...
