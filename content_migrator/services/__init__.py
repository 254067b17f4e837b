"""Service integrations for the object stores and the admin APIs."""

__all__ = [
    "admin",
    "copier",
    "lister",
    "store",
]
