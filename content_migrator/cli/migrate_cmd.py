"""CLI command handlers for the migrate and retry workflows."""

from __future__ import annotations

import asyncio
import datetime
import logging
import os
import sys
from pathlib import Path
from types import SimpleNamespace

import click

from content_migrator.cli.common import cli, common_options, handle_exception
from content_migrator.cli.report import print_status_summary
from content_migrator.core.config import MigrationConfig, load_config
from content_migrator.core.migrator import prepare_org, run_content_migration
from content_migrator.core.state import MigrationStatus
from content_migrator.services.admin import AdminClient
from content_migrator.types import RunMode
from content_migrator.utils.logging import log_with_context, setup_logger

# Create logger instance
logger = logging.getLogger("content_migrator")


# ---------------------------------------------------------------------------
# migrate / retry subcommands
# ---------------------------------------------------------------------------


@cli.command()
@common_options
@click.argument("org")
@click.option(
    "--skip_config",
    is_flag=True,
    default=False,
    help="Skip org setup and config document migration; copy content only",
)
@click.option(
    "--config_only",
    is_flag=True,
    default=False,
    help="Only set up the org and migrate config documents; do not copy content",
)
def migrate(
    org: str,
    config: str,
    verbose: bool,
    no_progress: bool,
    json_logs: bool,
    skip_config: bool,
    config_only: bool,
) -> None:
    """Migrate ORG's configuration and content to the destination."""
    if skip_config and config_only:
        raise click.UsageError("--skip_config and --config_only are mutually exclusive")

    args = SimpleNamespace(
        org=org,
        mode=RunMode.MIGRATE,
        config=config,
        verbose=verbose,
        no_progress=no_progress,
        json_logs=json_logs,
        skip_config=skip_config,
        config_only=config_only,
    )
    _run(args)


@cli.command()
@common_options
@click.argument("org")
def retry(
    org: str, config: str, verbose: bool, no_progress: bool, json_logs: bool
) -> None:
    """Retry the objects that failed in ORG's last migration."""
    args = SimpleNamespace(
        org=org,
        mode=RunMode.RETRY,
        config=config,
        verbose=verbose,
        no_progress=no_progress,
        json_logs=json_logs,
        skip_config=True,
        config_only=False,
    )
    _run(args)


def _run(args: SimpleNamespace) -> None:
    output_dir = create_migration_output_directory()
    setup_logger(args.verbose, output_dir, json_logs=args.json_logs)

    log_startup_info(args)
    log_with_context(logging.INFO, f"Output directory: {output_dir}")

    orchestrator = MigrationOrchestrator(args)
    try:
        orchestrator.validate_prerequisites()
        orchestrator.run_migration()
    except (Exception, KeyboardInterrupt) as e:
        handle_exception(e)
        sys.exit(1)


# ---------------------------------------------------------------------------
# MigrationOrchestrator
# ---------------------------------------------------------------------------


class MigrationOrchestrator:
    """Orchestrates one CLI invocation: org setup, content copy, and reporting."""

    def __init__(self, args: SimpleNamespace) -> None:
        self.args = args
        self.config: MigrationConfig | None = None
        self.status: MigrationStatus | None = None

    def validate_prerequisites(self) -> None:
        """Load the configuration and check it supports the requested steps."""
        self.config = load_config(Path(self.args.config))
        if not self.args.skip_config:
            # Fail before any copy if the admin URLs are missing
            AdminClient.from_config(self.config)

    def run_migration(self) -> None:
        """Execute the requested steps in order."""
        if self.config is None:
            raise RuntimeError("Configuration not loaded")
        org = self.args.org
        mode = self.args.mode

        if not self.args.skip_config:
            log_with_context(logging.INFO, f"Migrating {org} configuration", org=org)
            prepare_org(AdminClient.from_config(self.config), org)

        if self.args.config_only:
            log_with_context(logging.INFO, "Config-only migration complete.", org=org)
            return

        self.status = asyncio.run(
            run_content_migration(
                self.config, org, mode, show_progress=not self.args.no_progress
            )
        )
        print_status_summary(self.status, mode=mode)
        if mode is RunMode.RETRY:
            click.echo("Retry complete.")
        else:
            click.echo("Migration complete.")


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def log_startup_info(args: SimpleNamespace) -> None:
    """Log startup information.

    Args:
        args: Parsed CLI arguments containing migration parameters.
    """
    config_path = Path(args.config)
    if not config_path.is_absolute():
        config_path = Path.cwd() / args.config

    log_with_context(logging.INFO, "Starting migration with the following parameters:")
    log_with_context(logging.INFO, f"- Org: {args.org}")
    log_with_context(logging.INFO, f"- Mode: {args.mode.value}")
    log_with_context(logging.INFO, f"- Config: {config_path}")
    log_with_context(logging.INFO, f"- Migrate org config: {not args.skip_config}")
    log_with_context(logging.INFO, f"- Copy content: {not args.config_only}")
    log_with_context(logging.INFO, f"- Verbose logging: {args.verbose}")


def create_migration_output_directory() -> str:
    """Create output directory for migration logs with timestamp.

    Returns:
        The path to the newly created output directory.
    """
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = os.path.join("migration_logs", f"run_{timestamp}")
    os.makedirs(output_dir, exist_ok=True)
    return output_dir
