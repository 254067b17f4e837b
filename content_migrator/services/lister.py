"""Paginated listing of an organization's source content."""

from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError, ClientError

from content_migrator.constants import DEFAULT_PAGE_SIZE
from content_migrator.core.context import source_bucket_for
from content_migrator.exceptions import ListingError, StoreError
from content_migrator.services.store import ObjectStore
from content_migrator.types import ListPage, PageToken
from content_migrator.utils.logging import log_with_context


class Lister:
    """Lists ``{org}-content`` one fixed-size page at a time."""

    def __init__(self, store: ObjectStore, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.store = store
        self.page_size = page_size

    async def list_page(self, org: str, continuation_token: PageToken = None) -> ListPage:
        """Return the page after ``continuation_token``.

        A ``None`` ``next_token`` on the returned page means the listing is
        exhausted and no further page may be requested.

        Raises:
            ListingError: If the listing call fails. The run must abort.
        """
        bucket = source_bucket_for(org)
        try:
            page = await self.store.list(bucket, self.page_size, continuation_token)
        except (StoreError, ClientError, BotoCoreError, OSError) as e:
            raise ListingError(f"Unable to list source content in {bucket}: {e}") from e

        log_with_context(
            logging.DEBUG,
            f"Listed {len(page.keys)} key(s) from {bucket}"
            + ("" if page.is_last else " (more pages)"),
            org=org,
            phase="listing",
        )
        return page
