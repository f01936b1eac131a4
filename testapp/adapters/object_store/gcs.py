"""Google Cloud Storage implementation of the ObjectStore protocol.

The storage SDK is blocking, so every call runs in a worker thread with an
explicit per-call timeout.
"""

import asyncio
from typing import Optional

from google.cloud import storage

from testapp.core.protocols.object_store import ObjectStore


class GoogleCloudObjectStore(ObjectStore):
    """ObjectStore bound to a single GCS bucket."""

    def __init__(
        self,
        client: storage.Client,
        bucket: str,
        *,
        project: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._bucket_name = bucket
        self._bucket = client.bucket(bucket)
        self._project = project
        self._timeout = timeout

    @classmethod
    def create(
        cls, bucket: str, *, project: Optional[str] = None, timeout: float = 10.0
    ) -> "GoogleCloudObjectStore":
        """Build a store using application-default credentials."""
        return cls(storage.Client(project=project), bucket, project=project, timeout=timeout)

    @property
    def bucket(self) -> str:
        return self._bucket_name

    async def check(self) -> None:
        """List the project's buckets to confirm credentials and API access."""

        def _list() -> int:
            buckets = self._client.list_buckets(project=self._project, timeout=self._timeout)
            return sum(1 for _ in buckets)

        await asyncio.to_thread(_list)

    async def write(self, key: str, data: bytes) -> None:
        blob = self._bucket.blob(key)
        # Reads must never be served from a cache.
        blob.cache_control = "no-store"
        await asyncio.to_thread(blob.upload_from_string, data, timeout=self._timeout)

    async def read(self, key: str) -> bytes:
        blob = self._bucket.blob(key)
        return await asyncio.to_thread(blob.download_as_bytes, timeout=self._timeout)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)
