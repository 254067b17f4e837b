"""Shared type definitions for the content migration tool.

Provides the small value types that flow through the migration pipeline:
store listing pages, fetched objects, per-object copy outcomes, and the
run mode that selects where a status document lives.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypedDict

ObjectKey = str
PageToken = Optional[str]


# ---------------------------------------------------------------------------
# Object store types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListPage:
    """One page of keys from a store listing.

    ``next_token`` is ``None`` (or empty) when there are no further pages.
    """

    keys: list[ObjectKey]
    next_token: PageToken = None

    @property
    def is_last(self) -> bool:
        """True when no further pages should be requested."""
        return not self.next_token


@dataclass
class StoredObject:
    """An object's body plus the headers that must survive the copy."""

    body: bytes
    content_type: str | None = None
    content_length: int | None = None
    metadata: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Run types
# ---------------------------------------------------------------------------


class RunMode(str, Enum):
    """Which kind of run produced a status document."""

    MIGRATE = "migrate"
    RETRY = "retry"


@dataclass(frozen=True)
class CopyOutcome:
    """Result of one attempted copy.

    ``error`` is a diagnostic for logs only; status documents record keys.
    """

    key: ObjectKey
    success: bool
    error: str | None = None

    @property
    def failed(self) -> bool:
        """True when the copy did not complete."""
        return not self.success


class StatusDocument(TypedDict):
    """On-disk shape of a run's status document."""

    org: str
    success: list[str]
    failed: list[str]
