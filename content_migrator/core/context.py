"""Immutable migration context.

MigrationContext is a frozen dataclass that holds the configuration and
identity of one migration run.  It is created once by the CLI and shared
(read-only) with every component that needs bucket names or key layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from content_migrator.constants import RESULTS_FILE_SUFFIX, SOURCE_BUCKET_SUFFIX
from content_migrator.core.config import MigrationConfig
from content_migrator.types import ObjectKey, RunMode


@dataclass(frozen=True)
class MigrationContext:
    """Immutable context for a migration run. Created once, shared everywhere."""

    org: str
    mode: RunMode
    config: MigrationConfig

    @property
    def source_bucket(self) -> str:
        """The organization's dedicated source bucket."""
        return source_bucket_for(self.org)

    @property
    def dest_bucket(self) -> str:
        return self.config.dest_bucket

    def dest_key(self, key: ObjectKey) -> str:
        """Destination key for ``key``: namespaced under the org."""
        return dest_key_for(self.org, key)

    @property
    def results_path(self) -> Path:
        """Path of this run's status document."""
        return results_path_for(Path(self.config.results_dir), self.org, self.mode)

    @property
    def log_prefix(self) -> str:
        """Mode-aware log prefix, e.g. ``"[RETRY] "``."""
        if self.mode is RunMode.RETRY:
            return "[RETRY] "
        return ""


def source_bucket_for(org: str) -> str:
    return f"{org}{SOURCE_BUCKET_SUFFIX}"


def dest_key_for(org: str, key: ObjectKey) -> str:
    return f"{org}/{key}"


def results_path_for(results_dir: Path, org: str, mode: RunMode) -> Path:
    """``migrate-acme.results.json`` / ``retry-acme.results.json`` in ``results_dir``."""
    return results_dir / f"{RunMode(mode).value}-{org}{RESULTS_FILE_SUFFIX}"
