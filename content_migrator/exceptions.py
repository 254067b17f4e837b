"""Custom exception hierarchy for the content migration tool."""


class MigratorError(Exception):
    """Base exception for all migration-related errors."""

    phase = "migration"


class ConfigError(MigratorError):
    """Raised when configuration is invalid or missing."""

    phase = "configuration"


class StoreError(MigratorError):
    """Raised when an object store call does not report success."""

    phase = "store"


class ListingError(MigratorError):
    """Raised when listing the source content fails. Aborts the whole run."""

    phase = "listing"


class CopyError(MigratorError):
    """Raised inside the copier when one object cannot be transferred.

    Never escapes a batch: the copier converts it into a failed outcome.
    """

    phase = "copy"


class PersistenceError(MigratorError):
    """Raised when a status document cannot be written."""

    phase = "persistence"


class NotFoundError(MigratorError):
    """Raised when a requested document does not exist."""

    phase = "retry-load"


class StatusNotFoundError(NotFoundError):
    """Raised when there is no prior migrate status to retry against."""


class StatusFormatError(MigratorError):
    """Raised when a status document exists but cannot be parsed."""

    phase = "retry-load"


class AdminAPIError(MigratorError):
    """Raised when an admin API call fails in an unrecoverable way."""

    phase = "org setup"


class DuplicateKeyError(MigratorError):
    """Raised when a run would record the same key twice in its status."""

    phase = "status merge"
