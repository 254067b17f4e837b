"""Core migration logic including configuration and orchestration."""

__all__ = [
    "batch",
    "config",
    "context",
    "migrator",
    "results",
    "retry",
    "state",
]
