"""Broker adapters."""

from testapp.adapters.broker.fake import FakeBrokerConnection, FakeBrokerConnector
from testapp.adapters.broker.kafka import KafkaBrokerConnection, KafkaBrokerConnector

__all__ = [
    "KafkaBrokerConnection",
    "KafkaBrokerConnector",
    "FakeBrokerConnection",
    "FakeBrokerConnector",
]
