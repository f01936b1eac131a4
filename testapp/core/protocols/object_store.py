"""ObjectStore protocol for bucket probes.

Wraps a single bucket so ``BucketProbe`` can drive Google Cloud Storage and
S3-compatible gateways (Ceph RGW) the same way.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStore(Protocol):
    """Read/write access to objects in one bucket."""

    @property
    def bucket(self) -> str:
        """Name of the bucket this store is bound to."""
        ...

    async def check(self) -> None:
        """Verify the bucket is reachable with the configured credentials.

        Raises:
            Any exception when the bucket cannot be accessed.
        """
        ...

    async def write(self, key: str, data: bytes) -> None:
        """Overwrite object ``key`` with ``data``."""
        ...

    async def read(self, key: str) -> bytes:
        """Return the current contents of object ``key``."""
        ...

    async def close(self) -> None:
        """Release the underlying client."""
        ...
