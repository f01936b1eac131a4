"""Warehouse adapters."""

from testapp.adapters.warehouse.bigquery import BigQueryWarehouseClient
from testapp.adapters.warehouse.fake import FakeWarehouseClient

__all__ = ["BigQueryWarehouseClient", "FakeWarehouseClient"]
