"""Concurrent execution of one batch of copies."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Callable, Optional

from content_migrator.services.copier import Copier
from content_migrator.types import CopyOutcome, ObjectKey
from content_migrator.utils.logging import log_with_context

ProgressCallback = Callable[[int], None]


class BatchRunner:
    """Runs one copy per key concurrently and waits for all of them to settle.

    ``processed`` is the cumulative number of objects settled by this runner;
    it only grows, and ``on_progress`` is called with it after every batch.
    """

    def __init__(
        self, copier: Copier, on_progress: Optional[ProgressCallback] = None
    ) -> None:
        self.copier = copier
        self.on_progress = on_progress
        self.processed = 0

    async def run_batch(self, org: str, keys: Sequence[ObjectKey]) -> list[CopyOutcome]:
        """Copy ``keys`` concurrently; return their outcomes in input order.

        Returns only once every copy has succeeded, failed or timed out.
        """
        outcomes: list[CopyOutcome] = []
        if keys:
            outcomes = list(
                await asyncio.gather(
                    *(self.copier.copy_object(org, key) for key in keys)
                )
            )

        self.processed += len(outcomes)
        failed = sum(1 for outcome in outcomes if outcome.failed)
        log_with_context(
            logging.DEBUG,
            f"Batch settled: {len(outcomes) - failed} copied, {failed} failed, "
            f"{self.processed} processed so far",
            org=org,
            phase="copying",
        )
        if self.on_progress is not None:
            self.on_progress(self.processed)
        return outcomes
