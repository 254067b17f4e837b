"""
Main migrator class for the content migration tool
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator

from tqdm import tqdm

from content_migrator.core.batch import BatchRunner, ProgressCallback
from content_migrator.core.config import MigrationConfig
from content_migrator.core.context import MigrationContext
from content_migrator.core.results import ResultStore
from content_migrator.core.retry import RetryDriver
from content_migrator.core.state import MigrationStatus
from content_migrator.services.admin import AdminClient
from content_migrator.services.copier import Copier
from content_migrator.services.lister import Lister
from content_migrator.services.store import ObjectStore, S3ObjectStore
from content_migrator.types import RunMode
from content_migrator.utils.logging import log_with_context


class ContentMigrator:
    """Coordinates full and retry runs for one organization.

    The migrator is the only owner of the run's :class:`MigrationStatus`:
    it merges each batch after the batch has fully settled, and persists the
    status once, after the last batch.
    """

    def __init__(
        self,
        config: MigrationConfig,
        source: ObjectStore,
        dest: ObjectStore,
        results: ResultStore | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.results = results or ResultStore(config.results_dir)
        self.lister = Lister(source, config.page_size)
        self.copier = Copier(
            source, dest, dest_bucket=config.dest_bucket, timeout=config.copy_timeout
        )
        self.runner = BatchRunner(self.copier, on_progress=on_progress)
        self.retry_driver = RetryDriver(
            self.results, self.runner, chunk_size=config.page_size
        )
        self.pages_processed = 0

    async def migrate(self, org: str) -> MigrationStatus:
        """List and copy all of ``org``'s content, then persist the status.

        Raises:
            ListingError: If any listing call fails; nothing is persisted.
            DuplicateKeyError: If the listing returns a key already copied; nothing is persisted.
            PersistenceError: If the status document cannot be written.
        """
        log_with_context(logging.INFO, f"Migrating content for {org}", org=org)
        status = MigrationStatus(org=org)
        token = None
        while True:
            page = await self.lister.list_page(org, token)
            self.pages_processed += 1
            status.merge(await self.runner.run_batch(org, page.keys))
            if page.is_last:
                break
            token = page.next_token

        log_with_context(
            logging.INFO,
            f"Content copy finished after {self.pages_processed} page(s)",
            org=org,
            phase="completed",
        )
        self.results.persist(org, RunMode.MIGRATE, status)
        return status

    async def retry(self, org: str) -> MigrationStatus:
        """Replay the last migrate run's failures and persist a fresh retry status.

        Raises:
            StatusNotFoundError: If there is no migrate status to retry.
            PersistenceError: If the status document cannot be written.
        """
        log_with_context(logging.INFO, f"Retrying failures in migration of {org}", org=org)
        status = await self.retry_driver.retry(org)
        log_with_context(
            logging.INFO,
            f"Retry finished: {len(status.success)} recovered, {len(status.failed)} still failing",
            org=org,
            phase="completed",
        )
        self.results.persist(org, RunMode.RETRY, status)
        return status

    async def run(self, org: str, mode: RunMode) -> MigrationStatus:
        if RunMode(mode) is RunMode.RETRY:
            return await self.retry(org)
        return await self.migrate(org)


def prepare_org(admin: AdminClient, org: str) -> None:
    """Register the org on the destination and copy its configuration documents."""
    admin.create_org(org)
    if admin.migrate_org_config(org):
        log_with_context(logging.INFO, "Org config migrated.", org=org)
    sites = admin.migrate_site_config(org)
    log_with_context(logging.INFO, f"Migrated config for {len(sites)} site(s).", org=org)


@contextlib.asynccontextmanager
async def open_s3_migrator(
    config: MigrationConfig, on_progress: ProgressCallback | None = None
) -> AsyncIterator[ContentMigrator]:
    """Yield a ContentMigrator wired to S3 clients for the configured stores."""
    async with S3ObjectStore(
        config.source, max_connections=config.page_size, timeout=config.copy_timeout
    ) as source, S3ObjectStore(
        config.dest, max_connections=config.page_size, timeout=config.copy_timeout
    ) as dest:
        yield ContentMigrator(config, source, dest, on_progress=on_progress)


async def run_content_migration(
    config: MigrationConfig, org: str, mode: RunMode, show_progress: bool = True
) -> MigrationStatus:
    """Run a full or retry content migration against S3 with a progress bar."""
    context = MigrationContext(org=org, mode=RunMode(mode), config=config)
    log_with_context(
        logging.INFO,
        f"{context.log_prefix}Copying {context.source_bucket} into "
        f"{context.dest_bucket}/{context.dest_key('')}",
        org=org,
    )
    with tqdm(
        desc=f"{context.log_prefix}Copying {org} content",
        unit="obj",
        disable=not show_progress,
    ) as pbar:

        def update(processed: int) -> None:
            pbar.update(processed - pbar.n)

        async with open_s3_migrator(config, on_progress=update) as migrator:
            status = await migrator.run(org, context.mode)
    log_with_context(
        logging.INFO, f"Status written to {context.results_path}", org=org
    )
    return status
