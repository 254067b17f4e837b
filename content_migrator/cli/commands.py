#!/usr/bin/env python3
"""
Main execution module for the content migration tool.

Importing the subcommand modules registers them on the shared ``cli`` group.
"""

from content_migrator.cli import config_cmd, migrate_cmd, report  # noqa: F401
from content_migrator.cli.common import cli, handle_exception

__all__ = ["cli", "handle_exception", "main"]


def main() -> None:
    """Run the CLI."""
    cli()


if __name__ == "__main__":
    main()
