"""Object storage probe.

Writes the test value to a fixed object and reads it straight back.  The
same probe drives Google Cloud Storage (``bucket``) and S3-compatible Ceph
RGW gateways (``ceph``); only the injected ``ObjectStore`` differs.
"""

from testapp.core.exceptions import ProbeInitError
from testapp.core.protocols.object_store import ObjectStore
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.probes._base import BaseProbe


class BucketProbe(BaseProbe):
    """Round-trips a value through one object in one bucket."""

    def __init__(
        self,
        store: ObjectStore,
        object_name: str,
        metrics: ProbeMetrics,
        *,
        name: str = "bucket",
    ) -> None:
        super().__init__(name, metrics)
        self._store = store
        self._object_name = object_name

    async def init(self) -> None:
        try:
            await self._store.check()
        except Exception as e:
            raise ProbeInitError(self.name, e) from e
        self.logger.info(f"bucket {self._store.bucket} is reachable")

    async def test(self, value: str) -> str:
        await self._write(value)
        return await self._read()

    async def cleanup(self) -> None:
        try:
            await self._store.close()
        except Exception as e:
            self.logger.error(f"cleanup {self.name}: {e}")

    async def _write(self, value: str) -> None:
        await self._instrumented(
            f"{self.name}_write",
            lambda: self._store.write(self._object_name, value.encode()),
            error=f"unable to write to bucket {self._store.bucket}",
        )

    async def _read(self) -> str:
        data = await self._instrumented(
            f"{self.name}_read",
            lambda: self._store.read(self._object_name),
            error=f"unable to read from bucket {self._store.bucket}",
        )
        return data.decode(errors="replace")
