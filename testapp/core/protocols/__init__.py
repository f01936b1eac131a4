"""Core protocols for dependency injection.

Probes depend on these capability protocols rather than on vendor SDKs;
the concrete adapters live under ``testapp.adapters``.
"""

from testapp.core.protocols.broker import BrokerConnection, BrokerConnector
from testapp.core.protocols.metrics_renderer import MetricsRenderer
from testapp.core.protocols.object_store import ObjectStore
from testapp.core.protocols.probe_metrics import ProbeMetrics
from testapp.core.protocols.sql import SqlPool
from testapp.core.protocols.testable import Testable
from testapp.core.protocols.warehouse import WarehouseClient

__all__ = [
    "BrokerConnection",
    "BrokerConnector",
    "MetricsRenderer",
    "ObjectStore",
    "ProbeMetrics",
    "SqlPool",
    "Testable",
    "WarehouseClient",
]
