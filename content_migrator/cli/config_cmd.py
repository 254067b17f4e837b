"""CLI command handler for writing a starter configuration file."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from content_migrator.cli.common import cli
from content_migrator.core.config import create_default_config

# ---------------------------------------------------------------------------
# init-config subcommand
# ---------------------------------------------------------------------------


@cli.command("init-config")
@click.argument("path", default=".dev.vars")
def init_config(path: str) -> None:
    """Write a template configuration file to PATH.

    An existing file is left untouched and the command exits with status 1.
    """
    if not create_default_config(Path(path)):
        sys.exit(1)
    click.echo(f"Wrote template configuration to {path}")
