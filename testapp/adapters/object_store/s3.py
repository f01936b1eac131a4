"""S3-compatible implementation of the ObjectStore protocol (Ceph RGW).

Uses aioboto3 with path-style addressing so the gateway host can be used
directly instead of ``<bucket>.<host>`` virtual hosts.
"""

from contextlib import AsyncExitStack
from typing import Any, Optional

import aioboto3
from aiobotocore.config import AioConfig

from testapp.core.protocols.object_store import ObjectStore


class S3ObjectStore(ObjectStore):
    """ObjectStore bound to a single bucket on an S3-compatible gateway."""

    def __init__(
        self,
        *,
        endpoint_url: str,
        bucket: str,
        region: str,
        access_key: str,
        secret_key: str,
        timeout: float = 10.0,
    ) -> None:
        self._endpoint_url = endpoint_url
        self._bucket = bucket
        self._region = region
        self._access_key = access_key
        self._secret_key = secret_key
        self._timeout = timeout
        self._session = aioboto3.Session()
        self._exit_stack = AsyncExitStack()
        self._client: Optional[Any] = None

    @property
    def bucket(self) -> str:
        return self._bucket

    async def _get_client(self) -> Any:
        """Get or create the S3 client."""
        if self._client is None:
            self._client = await self._exit_stack.enter_async_context(
                self._session.client(
                    "s3",
                    endpoint_url=self._endpoint_url,
                    aws_access_key_id=self._access_key,
                    aws_secret_access_key=self._secret_key,
                    region_name=self._region,
                    config=AioConfig(
                        s3={"addressing_style": "path"},
                        connect_timeout=self._timeout,
                        read_timeout=self._timeout,
                        retries={"max_attempts": 1},
                    ),
                )
            )
        return self._client

    async def check(self) -> None:
        client = await self._get_client()
        await client.head_bucket(Bucket=self._bucket)

    async def write(self, key: str, data: bytes) -> None:
        client = await self._get_client()
        await client.put_object(Bucket=self._bucket, Key=key, Body=data)

    async def read(self, key: str) -> bytes:
        client = await self._get_client()
        response = await client.get_object(Bucket=self._bucket, Key=key)
        async with response["Body"] as stream:
            return await stream.read()

    async def close(self) -> None:
        self._client = None
        await self._exit_stack.aclose()
