"""SQL adapters."""

from testapp.adapters.sql.fake import FakePoolFactory, FakeSqlPool
from testapp.adapters.sql.postgres import create_postgres_pool

__all__ = ["create_postgres_pool", "FakePoolFactory", "FakeSqlPool"]
