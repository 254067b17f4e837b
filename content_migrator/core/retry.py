"""Replay of a previous run's failed keys."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

from content_migrator.constants import DEFAULT_PAGE_SIZE
from content_migrator.core.batch import BatchRunner
from content_migrator.core.results import ResultStore
from content_migrator.core.state import MigrationStatus
from content_migrator.types import ObjectKey
from content_migrator.utils.logging import log_with_context


def chunked(keys: Sequence[ObjectKey], size: int) -> Iterator[Sequence[ObjectKey]]:
    """Yield consecutive slices of ``keys`` holding at most ``size`` items."""
    if size < 1:
        raise ValueError(f"chunk size must be positive, got {size}")
    for start in range(0, len(keys), size):
        yield keys[start : start + size]


class RetryDriver:
    """Re-runs the failed keys of the last full migration in bounded chunks.

    Chunks run one after another so at most ``chunk_size`` copies are in
    flight. Each call builds a fresh status; earlier documents are not merged.
    """

    def __init__(
        self,
        results: ResultStore,
        runner: BatchRunner,
        chunk_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.results = results
        self.runner = runner
        self.chunk_size = chunk_size

    async def retry(self, org: str) -> MigrationStatus:
        """Replay the failed keys of ``org``'s last migrate run.

        Raises:
            StatusNotFoundError: If there is no migrate status to retry.
        """
        keys = self.results.load_failures(org)
        return await self.replay(org, keys)

    async def replay(self, org: str, keys: Sequence[ObjectKey]) -> MigrationStatus:
        """Copy ``keys`` chunk by chunk and return the resulting status.

        Raises:
            DuplicateKeyError: If ``keys`` repeats a key.
        """
        status = MigrationStatus(org=org)
        for number, chunk in enumerate(chunked(keys, self.chunk_size), start=1):
            log_with_context(
                logging.DEBUG,
                f"Retrying chunk {number} ({len(chunk)} key(s))",
                org=org,
                phase="copying",
            )
            status.merge(await self.runner.run_batch(org, chunk))
        return status
