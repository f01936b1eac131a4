"""Kafka implementation of the BrokerConnector protocol.

Each ``open()`` bootstraps a fresh aiokafka client against exactly one
broker address, so a failure points at the broker that caused it.
"""

import ssl
from typing import Optional

from aiokafka.client import AIOKafkaClient
from aiokafka.helpers import create_ssl_context

from testapp.core.protocols.broker import BrokerConnection, BrokerConnector


class KafkaBrokerConnection(BrokerConnection):
    """A bootstrapped client talking to a single broker."""

    def __init__(self, address: str, client: AIOKafkaClient) -> None:
        self._address = address
        self._client = client
        self._closed = False

    @property
    def address(self) -> str:
        return self._address

    def connected(self) -> bool:
        return not self._closed and bool(self._client.cluster.brokers())

    async def close(self) -> None:
        self._closed = True
        await self._client.close()


class KafkaBrokerConnector(BrokerConnector):
    """Opens TLS connections to Kafka brokers."""

    def __init__(
        self,
        ssl_context: Optional[ssl.SSLContext] = None,
        *,
        request_timeout_ms: int = 10_000,
    ) -> None:
        self._ssl_context = ssl_context
        self._request_timeout_ms = request_timeout_ms

    @classmethod
    def from_files(
        cls,
        *,
        ca_path: Optional[str],
        certificate_path: Optional[str],
        private_key_path: Optional[str],
        request_timeout_ms: int = 10_000,
    ) -> "KafkaBrokerConnector":
        """Build a connector using mutual TLS from PEM files.

        Without a CA path the connection is plaintext.
        """
        context = None
        if ca_path:
            context = create_ssl_context(
                cafile=ca_path,
                certfile=certificate_path,
                keyfile=private_key_path,
            )
        return cls(context, request_timeout_ms=request_timeout_ms)

    async def open(self, address: str) -> KafkaBrokerConnection:
        client = AIOKafkaClient(
            bootstrap_servers=address,
            security_protocol="SSL" if self._ssl_context else "PLAINTEXT",
            ssl_context=self._ssl_context,
            request_timeout_ms=self._request_timeout_ms,
        )
        try:
            await client.bootstrap()
        except BaseException:
            await client.close()
            raise
        return KafkaBrokerConnection(address, client)
