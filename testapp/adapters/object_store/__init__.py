"""Object store adapters."""

from testapp.adapters.object_store.fake import FakeObjectStore
from testapp.adapters.object_store.gcs import GoogleCloudObjectStore
from testapp.adapters.object_store.s3 import S3ObjectStore

__all__ = ["GoogleCloudObjectStore", "S3ObjectStore", "FakeObjectStore"]
