"""BrokerConnector protocol for the message-broker probe.

The broker probe only checks connectivity: open a connection to each
configured address, confirm it is connected, close it.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BrokerConnection(Protocol):
    """An open connection to a single broker."""

    @property
    def address(self) -> str:
        """``host:port`` of the broker."""
        ...

    def connected(self) -> bool:
        """Whether the connection is currently established."""
        ...

    async def close(self) -> None:
        """Close the connection."""
        ...


@runtime_checkable
class BrokerConnector(Protocol):
    """Factory for broker connections sharing one TLS configuration."""

    async def open(self, address: str) -> BrokerConnection:
        """Open a connection to ``address`` (``host:port``)."""
        ...
