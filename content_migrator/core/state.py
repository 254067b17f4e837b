"""
Migration status container for one content migration run.

The status is the success/failure partition of every key a run attempted.
It is owned by the coordinator alone: copy tasks return outcomes, and the
coordinator merges a whole settled batch at a time.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from content_migrator.exceptions import DuplicateKeyError
from content_migrator.types import CopyOutcome, ObjectKey, StatusDocument


@dataclass
class MigrationStatus:
    """Ordered success and failure lists for one run.

    ``success`` and ``failed`` are disjoint and hold each attempted key once.
    """

    org: str
    success: list[ObjectKey] = field(default_factory=list)
    failed: list[ObjectKey] = field(default_factory=list)
    _seen: set[ObjectKey] = field(default_factory=set, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate invariants after initialization."""
        seen: set[ObjectKey] = set()
        for key in (*self.success, *self.failed):
            if key in seen:
                raise ValueError(f"key {key!r} recorded more than once")
            seen.add(key)
        self._seen = seen

    def merge(self, outcomes: Iterable[CopyOutcome]) -> None:
        """Append a settled batch's outcomes in order.

        The batch is checked before anything is appended, so a rejected batch
        leaves the status unchanged.

        Raises:
            DuplicateKeyError: If a key was already recorded or repeats in the batch.
        """
        batch = list(outcomes)
        batch_keys: set[ObjectKey] = set()
        for outcome in batch:
            if outcome.key in self._seen or outcome.key in batch_keys:
                raise DuplicateKeyError(f"key {outcome.key!r} recorded more than once")
            batch_keys.add(outcome.key)

        for outcome in batch:
            if outcome.success:
                self.success.append(outcome.key)
            else:
                self.failed.append(outcome.key)
        self._seen.update(batch_keys)

    @property
    def attempted(self) -> int:
        """Total keys attempted (succeeded + failed)."""
        return len(self.success) + len(self.failed)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    @property
    def success_rate(self) -> float:
        """Percentage of attempted keys that copied. 100.0 when nothing was attempted."""
        if self.attempted == 0:
            return 100.0
        return (len(self.success) / self.attempted) * 100.0

    def to_dict(self) -> StatusDocument:
        return StatusDocument(
            org=self.org, success=list(self.success), failed=list(self.failed)
        )

    @classmethod
    def from_dict(cls, data: StatusDocument) -> MigrationStatus:
        return cls(
            org=data["org"],
            success=list(data["success"]),
            failed=list(data["failed"]),
        )
