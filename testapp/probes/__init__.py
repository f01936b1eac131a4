"""Backend probes and the registry that owns them."""

from testapp.probes.broker import BrokerProbe
from testapp.probes.bucket import BucketProbe
from testapp.probes.database import DatabaseProbe
from testapp.probes.registry import ProbeCandidate, ProbeRegistration, ProbeRegistry
from testapp.probes.warehouse import WarehouseProbe

__all__ = [
    "BrokerProbe",
    "BucketProbe",
    "DatabaseProbe",
    "ProbeCandidate",
    "ProbeRegistration",
    "ProbeRegistry",
    "WarehouseProbe",
]
