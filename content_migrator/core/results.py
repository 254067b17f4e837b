"""Status document persistence for resumable migrations."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from content_migrator.core.context import results_path_for
from content_migrator.core.state import MigrationStatus
from content_migrator.exceptions import (
    PersistenceError,
    StatusFormatError,
    StatusNotFoundError,
)
from content_migrator.types import ObjectKey, RunMode
from content_migrator.utils.logging import log_with_context


class ResultStore:
    """Reads and writes ``{mode}-{org}.results.json`` documents in one directory."""

    def __init__(self, results_dir: Path | str = ".") -> None:
        self.results_dir = Path(results_dir)

    def path_for(self, org: str, mode: RunMode) -> Path:
        return results_path_for(self.results_dir, org, mode)

    def persist(self, org: str, mode: RunMode, status: MigrationStatus) -> Path:
        """Atomically write the status document (write .tmp + rename).

        Overwrites any earlier document for the same org and mode.

        Raises:
            PersistenceError: If the document cannot be written.
        """
        path = self.path_for(org, mode)
        tmp = path.with_suffix(".tmp")
        try:
            self.results_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(status.to_dict(), indent=2) + "\n")
            tmp.replace(path)
        except OSError as e:
            raise PersistenceError(f"Failed to write status document {path}: {e}") from e

        log_with_context(
            logging.INFO, f"Wrote {RunMode(mode).value} status to {path}", org=org
        )
        return path

    def load_status(self, org: str, mode: RunMode) -> MigrationStatus:
        """Read a previously persisted status document.

        Raises:
            StatusNotFoundError: If no document exists for this org and mode.
            StatusFormatError: If the document is unreadable or malformed.
        """
        path = self.path_for(org, mode)
        if not path.exists():
            raise StatusNotFoundError(
                f"No {RunMode(mode).value} status found for {org} at {path}"
            )
        try:
            raw = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            raise StatusFormatError(f"Failed to read status document {path}: {e}") from e

        if not isinstance(raw, dict) or not all(
            isinstance(raw.get(name), list) for name in ("success", "failed")
        ):
            raise StatusFormatError(f"Status document {path} has invalid format")
        if not isinstance(raw.get("org", org), str) or not all(
            isinstance(key, str) for name in ("success", "failed") for key in raw[name]
        ):
            raise StatusFormatError(f"Status document {path} holds non-string entries")

        try:
            return MigrationStatus.from_dict(
                {"org": raw.get("org", org), "success": raw["success"], "failed": raw["failed"]}
            )
        except ValueError as e:
            raise StatusFormatError(f"Status document {path} is inconsistent: {e}") from e

    def load_failures(self, org: str) -> list[ObjectKey]:
        """Return the failed keys of the most recent full (migrate) run.

        Raises:
            StatusNotFoundError: If no migrate status exists, i.e. nothing to retry.
        """
        status = self.load_status(org, RunMode.MIGRATE)
        log_with_context(
            logging.INFO,
            f"Loaded {len(status.failed)} failed key(s) from the last migration",
            org=org,
        )
        return status.failed
