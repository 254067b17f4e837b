"""Unit tests for the S3 object store adapter with a mocked aioboto3 client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from content_migrator.core.config import StoreConfig
from content_migrator.exceptions import StoreError
from content_migrator.types import StoredObject


def _ok(**fields):
    return {"ResponseMetadata": {"HTTPStatusCode": 200}, **fields}


@pytest.fixture()
def mock_client():
    return AsyncMock(name="s3_client")


@pytest.fixture()
def mock_aioboto3(mock_client):
    """Patch aioboto3 so Session().client(...) yields ``mock_client``."""
    with patch("content_migrator.services.store.aioboto3") as mock_module:
        client_cm = MagicMock()
        client_cm.__aenter__ = AsyncMock(return_value=mock_client)
        client_cm.__aexit__ = AsyncMock(return_value=None)
        session = MagicMock()
        session.client = MagicMock(return_value=client_cm)
        mock_module.Session = MagicMock(return_value=session)
        yield mock_module


@pytest.fixture()
def store_config():
    return StoreConfig(
        endpoint_url="https://s3.example.com",
        region_name="auto",
        access_key_id="id",
        secret_access_key="secret",
    )


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_opens_client_with_config(self, mock_aioboto3, store_config):
        from content_migrator.services.store import S3ObjectStore

        async with S3ObjectStore(store_config, max_connections=100, timeout=30):
            pass

        session = mock_aioboto3.Session.return_value
        args, kwargs = session.client.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "https://s3.example.com"
        assert kwargs["aws_access_key_id"] == "id"
        assert kwargs["config"].max_pool_connections == 100
        session.client.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_use_outside_context_raises(self, mock_aioboto3, store_config):
        from content_migrator.services.store import S3ObjectStore

        with pytest.raises(RuntimeError):
            await S3ObjectStore(store_config).list("bucket", 10)


class TestList:
    @pytest.mark.asyncio
    async def test_first_page_omits_token(self, mock_aioboto3, mock_client, store_config):
        from content_migrator.services.store import S3ObjectStore

        mock_client.list_objects_v2.return_value = _ok(
            Contents=[{"Key": "a.html"}, {"Key": "b.html"}],
            NextContinuationToken="tok",
        )

        async with S3ObjectStore(store_config) as store:
            page = await store.list("acme-content", 100)

        mock_client.list_objects_v2.assert_awaited_once_with(Bucket="acme-content", MaxKeys=100)
        assert page.keys == ["a.html", "b.html"]
        assert page.next_token == "tok"

    @pytest.mark.asyncio
    async def test_passes_token_and_handles_last_empty_page(
        self, mock_aioboto3, mock_client, store_config
    ):
        from content_migrator.services.store import S3ObjectStore

        mock_client.list_objects_v2.return_value = _ok()

        async with S3ObjectStore(store_config) as store:
            page = await store.list("acme-content", 100, "tok")

        mock_client.list_objects_v2.assert_awaited_once_with(
            Bucket="acme-content", MaxKeys=100, ContinuationToken="tok"
        )
        assert page.keys == []
        assert page.is_last

    @pytest.mark.asyncio
    async def test_empty_token_is_treated_as_last_page(
        self, mock_aioboto3, mock_client, store_config
    ):
        from content_migrator.services.store import S3ObjectStore

        mock_client.list_objects_v2.return_value = _ok(
            Contents=[{"Key": "a.html"}], NextContinuationToken=""
        )

        async with S3ObjectStore(store_config) as store:
            page = await store.list("acme-content", 100)

        assert page.next_token is None
        assert page.is_last

    @pytest.mark.asyncio
    async def test_non_200_raises(self, mock_aioboto3, mock_client, store_config):
        from content_migrator.services.store import S3ObjectStore

        mock_client.list_objects_v2.return_value = {"ResponseMetadata": {"HTTPStatusCode": 500}}

        async with S3ObjectStore(store_config) as store:
            with pytest.raises(StoreError, match="500"):
                await store.list("acme-content", 100)


class TestGetPut:
    @pytest.mark.asyncio
    async def test_get_reads_body_and_headers(self, mock_aioboto3, mock_client, store_config):
        from content_migrator.services.store import S3ObjectStore

        body = AsyncMock()
        body.read.return_value = b"<html/>"
        mock_client.get_object.return_value = _ok(
            Body=body, ContentType="text/html", ContentLength=7, Metadata={"id": "1"}
        )

        async with S3ObjectStore(store_config) as store:
            obj = await store.get("acme-content", "a.html")

        mock_client.get_object.assert_awaited_once_with(Bucket="acme-content", Key="a.html")
        assert obj == StoredObject(
            body=b"<html/>", content_type="text/html", content_length=7, metadata={"id": "1"}
        )

    @pytest.mark.asyncio
    async def test_put_writes_everything_unchanged(self, mock_aioboto3, mock_client, store_config):
        from content_migrator.services.store import S3ObjectStore

        mock_client.put_object.return_value = _ok()
        obj = StoredObject(
            body=b"<html/>", content_type="text/html", content_length=7, metadata={"id": "1"}
        )

        async with S3ObjectStore(store_config) as store:
            await store.put("da-content", "acme/a.html", obj)

        mock_client.put_object.assert_awaited_once_with(
            Bucket="da-content",
            Key="acme/a.html",
            Body=b"<html/>",
            Metadata={"id": "1"},
            ContentType="text/html",
            ContentLength=7,
        )

    @pytest.mark.asyncio
    async def test_put_omits_missing_headers(self, mock_aioboto3, mock_client, store_config):
        from content_migrator.services.store import S3ObjectStore

        mock_client.put_object.return_value = _ok()

        async with S3ObjectStore(store_config) as store:
            await store.put("da-content", "acme/a", StoredObject(body=b""))

        kwargs = mock_client.put_object.await_args.kwargs
        assert "ContentType" not in kwargs
        assert "ContentLength" not in kwargs

    @pytest.mark.asyncio
    async def test_put_non_200_raises(self, mock_aioboto3, mock_client, store_config):
        from content_migrator.services.store import S3ObjectStore

        mock_client.put_object.return_value = {"ResponseMetadata": {"HTTPStatusCode": 403}}

        async with S3ObjectStore(store_config) as store:
            with pytest.raises(StoreError):
                await store.put("da-content", "acme/a", StoredObject(body=b""))
