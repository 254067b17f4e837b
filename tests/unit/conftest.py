"""Unit test configuration and shared fixtures."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

import pytest

from content_migrator.core.config import MigrationConfig
from content_migrator.core.results import ResultStore
from content_migrator.exceptions import StoreError
from content_migrator.types import ListPage, StoredObject

# ---------------------------------------------------------------------------
# In-memory object store
# ---------------------------------------------------------------------------


class InMemoryObjectStore:
    """ObjectStore fake holding objects in dicts, with knobs for failures.

    - ``fail_get`` / ``fail_put``: keys whose fetch or write raises StoreError
    - ``hang``: keys whose fetch never completes (for timeout tests)
    - ``page_plan``: explicit page sizes for successive list calls
    - ``fail_list``: when True every list call raises StoreError
    """

    def __init__(self) -> None:
        self.buckets: dict[str, dict[str, StoredObject]] = {}
        self.fail_get: set[str] = set()
        self.fail_put: set[str] = set()
        self.hang: set[str] = set()
        self.page_plan: list[int] | None = None
        self.fail_list = False
        self.list_calls: list[tuple[str, int, str | None]] = []
        self.get_calls: list[tuple[str, str]] = []
        self.put_calls: list[tuple[str, str]] = []

    def add_objects(self, bucket: str, keys: Iterable[str]) -> None:
        objects = self.buckets.setdefault(bucket, {})
        for key in keys:
            body = f"body of {key}".encode()
            objects[key] = StoredObject(
                body=body,
                content_type="text/html",
                content_length=len(body),
                metadata={"id": key},
            )

    async def list(self, bucket: str, page_size: int, continuation: str | None = None) -> ListPage:
        self.list_calls.append((bucket, page_size, continuation))
        if self.fail_list:
            raise StoreError(f"Listing {bucket} returned HTTP 500")
        keys = sorted(self.buckets.get(bucket, {}))
        start = int(continuation) if continuation else 0
        size = page_size
        if self.page_plan is not None:
            size = self.page_plan[len(self.list_calls) - 1]
        end = start + size
        page = keys[start:end]
        return ListPage(keys=page, next_token=str(end) if end < len(keys) else None)

    async def get(self, bucket: str, key: str) -> StoredObject:
        self.get_calls.append((bucket, key))
        await asyncio.sleep(0)
        if key in self.hang:
            await asyncio.sleep(3600)
        if key in self.fail_get:
            raise StoreError(f"Fetching {bucket}/{key} returned HTTP 500")
        try:
            return self.buckets[bucket][key]
        except KeyError:
            raise StoreError(f"Fetching {bucket}/{key} returned HTTP 404") from None

    async def put(self, bucket: str, key: str, obj: StoredObject) -> None:
        self.put_calls.append((bucket, key))
        await asyncio.sleep(0)
        if key.split("/", 1)[-1] in self.fail_put:
            raise StoreError(f"Writing {bucket}/{key} returned HTTP 500")
        self.buckets.setdefault(bucket, {})[key] = obj


def make_keys(count: int, prefix: str = "page") -> list[str]:
    """Zero-padded keys so sorted order equals creation order."""
    return [f"{prefix}-{i:04d}.html" for i in range(count)]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def source_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture()
def dest_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture()
def migration_config(tmp_path) -> MigrationConfig:
    """Default config with status documents written under tmp_path."""
    return MigrationConfig(results_dir=str(tmp_path), copy_timeout=1.0)


@pytest.fixture()
def result_store(tmp_path) -> ResultStore:
    return ResultStore(tmp_path)


@pytest.fixture()
def seeded_source(source_store):
    """Factory fixture: seed ``{org}-content`` with ``count`` objects and return the keys."""

    def _seed(org: str, count: int) -> Sequence[str]:
        keys = make_keys(count)
        source_store.add_objects(f"{org}-content", keys)
        return keys

    return _seed
