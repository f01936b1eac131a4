"""Testable protocol for backend round-trip probes.

Each probe wraps a single external backend (object storage, database,
warehouse, broker) and exposes the same four members, so the registry and
the HTTP handler can drive any of them without knowing the concrete type.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Testable(Protocol):
    """Protocol for a backend probe.

    Lifecycle: ``init()`` exactly once, then any number of ``test()`` calls,
    then ``cleanup()`` at most once during shutdown.
    """

    @property
    def name(self) -> str:
        """Stable identifier used for the route path, metric labels and logs."""
        ...

    async def init(self) -> None:
        """Provision or verify the backend resource.

        Must be idempotent: an "already exists" outcome is success.

        Raises:
            ProbeInitError: The backend could not be prepared.
        """
        ...

    async def test(self, value: str) -> str:
        """Write ``value`` to the backend, read it back and return what was read.

        Raises:
            ProbeOperationError: A backend call failed. Never retried here.
        """
        ...

    async def cleanup(self) -> None:
        """Release clients and pools.

        Best-effort; must be safe on a probe whose ``init()`` never completed.
        """
        ...
