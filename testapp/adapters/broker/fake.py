"""Fake BrokerConnector for testing."""

from typing import Optional


class FakeBrokerConnection:
    """Connection handed out by ``FakeBrokerConnector``."""

    def __init__(self, address: str, connected: bool = True) -> None:
        self._address = address
        self._connected = connected
        self.closed = False

    @property
    def address(self) -> str:
        return self._address

    def connected(self) -> bool:
        return self._connected and not self.closed

    async def close(self) -> None:
        self.closed = True


class FakeBrokerConnector:
    """In-memory connector.

    Usage:
        connector = FakeBrokerConnector()
        connector.set_unreachable("broker-2:9092", ConnectionRefusedError())
        connector.set_disconnected("broker-3:9092")
    """

    def __init__(self) -> None:
        self.opened: list[FakeBrokerConnection] = []
        self._errors: dict[str, Exception] = {}
        self._disconnected: set[str] = set()

    async def open(self, address: str) -> FakeBrokerConnection:
        error: Optional[Exception] = self._errors.get(address)
        if error is not None:
            raise error
        connection = FakeBrokerConnection(address, connected=address not in self._disconnected)
        self.opened.append(connection)
        return connection

    # -- test helpers --

    def set_unreachable(self, address: str, error: Exception) -> None:
        """Make ``open(address)`` raise ``error``."""
        self._errors[address] = error

    def set_disconnected(self, address: str) -> None:
        """Make connections to ``address`` report ``connected() == False``."""
        self._disconnected.add(address)

    @property
    def open_connections(self) -> list[FakeBrokerConnection]:
        """Connections that were opened but not closed."""
        return [c for c in self.opened if not c.closed]
