"""
Status reporting for content migration runs
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from content_migrator.cli.common import cli, handle_exception
from content_migrator.core.config import load_config
from content_migrator.core.results import ResultStore
from content_migrator.core.state import MigrationStatus
from content_migrator.exceptions import MigratorError, StatusNotFoundError
from content_migrator.types import RunMode
from content_migrator.utils.logging import log_with_context


def print_status_summary(
    status: MigrationStatus,
    mode: RunMode = RunMode.MIGRATE,
    show_failed: bool = False,
) -> None:
    """Print a run's success and failure counts to the console."""
    click.echo(f"Successes: {len(status.success)}")
    click.echo(f"Failures: {len(status.failed)}")
    if status.attempted:
        click.echo(f"Success rate: {status.success_rate:.1f}%")
    if show_failed and status.failed:
        click.echo("Failed keys:")
        for key in status.failed:
            click.echo(f"  {key}")
    if status.has_failures and RunMode(mode) is RunMode.MIGRATE:
        click.echo(f"Run 'content-migrator retry {status.org}' to retry the failures.")


def resolve_results_dir(config_path: str, results_dir: Optional[str]) -> str:
    """An explicit directory wins; otherwise use the config file's, if there is one."""
    if results_dir is not None:
        return results_dir
    if Path(config_path).exists():
        return load_config(Path(config_path)).results_dir
    return "."


@cli.command()
@click.argument("org")
@click.option(
    "--mode",
    type=click.Choice([m.value for m in RunMode]),
    default=RunMode.MIGRATE.value,
    show_default=True,
    help="Which run's status document to read",
)
@click.option(
    "--config",
    default=".dev.vars",
    show_default=True,
    help="Config file whose results_dir is read when --results_dir is not given",
)
@click.option(
    "--results_dir",
    default=None,
    help="Directory holding the status documents (overrides the config file)",
)
@click.option(
    "--show_failed",
    is_flag=True,
    default=False,
    help="List every failed key",
)
def status(
    org: str, mode: str, config: str, results_dir: Optional[str], show_failed: bool
) -> None:
    """Print the success and failure counts of ORG's last run."""
    run_mode = RunMode(mode)
    try:
        directory = resolve_results_dir(config, results_dir)
        result = ResultStore(Path(directory)).load_status(org, run_mode)
    except StatusNotFoundError as e:
        log_with_context(logging.ERROR, f"No status document: {e}", org=org)
        sys.exit(1)
    except MigratorError as e:
        handle_exception(e)
        sys.exit(1)
    print_status_summary(result, mode=run_mode, show_failed=show_failed)
