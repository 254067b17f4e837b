"""Single-object copy from the source store to the destination store."""

from __future__ import annotations

import asyncio
import logging

from botocore.exceptions import BotoCoreError, ClientError

from content_migrator.constants import DEFAULT_COPY_TIMEOUT, DEFAULT_DEST_BUCKET
from content_migrator.core.context import dest_key_for, source_bucket_for
from content_migrator.exceptions import CopyError, StoreError
from content_migrator.services.store import ObjectStore
from content_migrator.types import CopyOutcome, ObjectKey
from content_migrator.utils.logging import log_with_context


def _describe(e: BaseException) -> str:
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        return f"{error.get('Code', 'ClientError')}: {error.get('Message', e)}"
    return str(e) or type(e).__name__


class Copier:
    """Copies ``{org}-content/{key}`` to ``{dest_bucket}/{org}/{key}``.

    The source object is only read. Every failure, including a timeout, comes
    back as a failed :class:`CopyOutcome` instead of an exception.
    """

    def __init__(
        self,
        source: ObjectStore,
        dest: ObjectStore,
        dest_bucket: str = DEFAULT_DEST_BUCKET,
        timeout: float = DEFAULT_COPY_TIMEOUT,
    ) -> None:
        self.source = source
        self.dest = dest
        self.dest_bucket = dest_bucket
        self.timeout = timeout

    async def _transfer(self, org: str, key: ObjectKey) -> None:
        source_bucket = source_bucket_for(org)
        try:
            obj = await self.source.get(source_bucket, key)
        except (StoreError, ClientError, BotoCoreError, OSError) as e:
            raise CopyError(f"fetch from {source_bucket} failed: {_describe(e)}") from e

        dest_key = dest_key_for(org, key)
        try:
            await self.dest.put(self.dest_bucket, dest_key, obj)
        except (StoreError, ClientError, BotoCoreError, OSError) as e:
            raise CopyError(
                f"write to {self.dest_bucket}/{dest_key} failed: {_describe(e)}"
            ) from e

    async def copy_object(self, org: str, key: ObjectKey) -> CopyOutcome:
        """Copy one object, returning its outcome."""
        try:
            await asyncio.wait_for(self._transfer(org, key), timeout=self.timeout)
        except asyncio.TimeoutError:
            error = f"timed out after {self.timeout}s"
        except CopyError as e:
            error = str(e)
        except Exception as e:
            # Anything else from the client stack is still one object's failure
            error = f"unexpected error: {_describe(e)}"
        else:
            log_with_context(logging.DEBUG, "Copied object", org=org, key=key)
            return CopyOutcome(key=key, success=True)

        log_with_context(
            logging.WARNING, f"Failed to copy object: {error}", org=org, key=key
        )
        return CopyOutcome(key=key, success=False, error=error)
