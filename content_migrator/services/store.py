"""Object store adapters.

``ObjectStore`` is the capability the lister and copier consume: list a
page of keys, fetch an object, write an object.  ``S3ObjectStore`` implements
it on top of an ``aioboto3`` S3 client so copies within a batch can run
concurrently on one event loop.

The adapter reports non-200 responses as :class:`StoreError`; it does not add
retry logic of its own beyond botocore's standard retry mode.
"""

from __future__ import annotations

import contextlib
from typing import Any, Protocol

import aioboto3
from botocore.config import Config as BotoConfig

from content_migrator.constants import DEFAULT_PAGE_SIZE, HTTP_OK
from content_migrator.core.config import StoreConfig
from content_migrator.exceptions import StoreError
from content_migrator.types import ListPage, ObjectKey, PageToken, StoredObject


class ObjectStore(Protocol):
    """Store capability used by the lister and the copier."""

    async def list(
        self, bucket: str, page_size: int, continuation: PageToken = None
    ) -> ListPage: ...

    async def get(self, bucket: str, key: ObjectKey) -> StoredObject: ...

    async def put(self, bucket: str, key: str, obj: StoredObject) -> None: ...


def _check_status(response: dict[str, Any], action: str) -> None:
    status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    if status != HTTP_OK:
        raise StoreError(f"{action} returned HTTP {status}")


class S3ObjectStore:
    """S3 implementation of :class:`ObjectStore`.

    Use as an async context manager; the client is opened on enter and
    closed on exit::

        async with S3ObjectStore(config.source) as store:
            page = await store.list("acme-content", 100)
    """

    def __init__(
        self,
        store_config: StoreConfig,
        max_connections: int = DEFAULT_PAGE_SIZE,
        timeout: float | None = None,
    ) -> None:
        self.store_config = store_config
        self.boto_config = BotoConfig(
            max_pool_connections=max_connections,
            connect_timeout=timeout or 60,
            read_timeout=timeout or 60,
            retries={"mode": "standard"},
            signature_version="s3v4",
        )
        self._session = aioboto3.Session()
        self._stack: contextlib.AsyncExitStack | None = None
        self._client: Any = None

    async def __aenter__(self) -> S3ObjectStore:
        self._stack = contextlib.AsyncExitStack()
        self._client = await self._stack.enter_async_context(
            self._session.client(
                "s3", config=self.boto_config, **self.store_config.client_kwargs()
            )
        )
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._stack is not None:
            await self._stack.aclose()
        self._stack = None
        self._client = None

    @property
    def client(self) -> Any:
        if self._client is None:
            raise RuntimeError("S3ObjectStore used outside 'async with'")
        return self._client

    async def list(
        self, bucket: str, page_size: int, continuation: PageToken = None
    ) -> ListPage:
        """List one page of keys with ``list_objects_v2``."""
        kwargs: dict[str, Any] = {"Bucket": bucket, "MaxKeys": page_size}
        if continuation:
            kwargs["ContinuationToken"] = continuation
        response = await self.client.list_objects_v2(**kwargs)
        _check_status(response, f"Listing {bucket}")
        keys = [entry["Key"] for entry in response.get("Contents", [])]
        # An empty token also ends the listing
        return ListPage(keys=keys, next_token=response.get("NextContinuationToken") or None)

    async def get(self, bucket: str, key: ObjectKey) -> StoredObject:
        """Fetch an object's body and headers, reading the body fully."""
        response = await self.client.get_object(Bucket=bucket, Key=key)
        _check_status(response, f"Fetching {bucket}/{key}")
        body = await response["Body"].read()
        return StoredObject(
            body=body,
            content_type=response.get("ContentType"),
            content_length=response.get("ContentLength"),
            metadata=dict(response.get("Metadata") or {}),
        )

    async def put(self, bucket: str, key: str, obj: StoredObject) -> None:
        """Write an object with its content type, length and metadata unchanged."""
        kwargs: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": obj.body,
            "Metadata": obj.metadata,
        }
        if obj.content_type is not None:
            kwargs["ContentType"] = obj.content_type
        if obj.content_length is not None:
            kwargs["ContentLength"] = obj.content_length
        response = await self.client.put_object(**kwargs)
        _check_status(response, f"Writing {bucket}/{key}")
