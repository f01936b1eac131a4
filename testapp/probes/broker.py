"""Message broker probe (Kafka).

Unlike the other probes this one moves no data: it opens a connection to
each configured broker, confirms it is connected and closes it again.
``test`` hands its input back unchanged on success.
"""

from testapp.core.exceptions import ProbeInitError, ProbeOperationError
from testapp.core.protocols.broker import BrokerConnection, BrokerConnector
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.probes._base import BaseProbe


class BrokerNotConnectedError(Exception):
    """A broker connection opened but did not report itself connected."""


class BrokerProbe(BaseProbe):
    """Connectivity check against every configured broker address."""

    def __init__(
        self,
        connector: BrokerConnector,
        addresses: list[str],
        metrics: ProbeMetrics,
    ) -> None:
        super().__init__("kafka", metrics)
        if not addresses:
            raise ValueError("at least one broker address is required")
        self._connector = connector
        self._addresses = list(addresses)
        self._open: set[BrokerConnection] = set()

    async def init(self) -> None:
        try:
            await self._check_all()
        except ProbeOperationError as e:
            raise ProbeInitError(self.name, e) from e
        self.logger.info(f"connected to {len(self._addresses)} broker(s)")

    async def test(self, value: str) -> str:
        await self._check_all()
        return value

    async def cleanup(self) -> None:
        for connection in list(self._open):
            await self._close(connection)

    async def _check_all(self) -> None:
        for address in self._addresses:
            await self._instrumented(
                "kafka_connect",
                lambda: self._check(address),
                error=f"verifying connection to broker {address}",
            )

    async def _check(self, address: str) -> None:
        connection = await self._connector.open(address)
        self._open.add(connection)
        try:
            if not connection.connected():
                raise BrokerNotConnectedError("connection not established")
        finally:
            await self._close(connection)

    async def _close(self, connection: BrokerConnection) -> None:
        self._open.discard(connection)
        try:
            await connection.close()
        except Exception as e:
            self.logger.warning(f"could not close connection to {connection.address}: {e}")
