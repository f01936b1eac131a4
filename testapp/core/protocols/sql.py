"""SqlPool protocol for the database probe.

Matches the subset of ``asyncpg.Pool`` the probe uses, so tests can inject
an in-memory fake in place of a live PostgreSQL server.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SqlPool(Protocol):
    """Pooled SQL connection."""

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a statement and return its status string."""
        ...

    async def fetch(self, query: str, *args: Any) -> Sequence[Any]:
        """Run a query and return all rows (mapping-like records)."""
        ...

    async def close(self) -> None:
        """Close every connection in the pool."""
        ...
