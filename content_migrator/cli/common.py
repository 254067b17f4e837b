"""Shared CLI infrastructure: option decorators, error handlers, and the CLI group."""

from __future__ import annotations

import logging
from typing import Callable, ClassVar

import click

import content_migrator
from content_migrator.exceptions import MigratorError, NotFoundError
from content_migrator.utils.logging import log_with_context

# Create logger instance
logger = logging.getLogger("content_migrator")


# ---------------------------------------------------------------------------
# Custom click.Group that accepts the positional ``ORG [retry]`` form.
# When the first CLI token is not a subcommand or a group flag, the group
# rewrites
#   ``content-migrator acme``        -> ``content-migrator migrate acme``
#   ``content-migrator acme retry``  -> ``content-migrator retry acme``
# ---------------------------------------------------------------------------


class DefaultGroup(click.Group):
    """Click group that defaults to the ``migrate`` subcommand."""

    # Flags that belong to the group itself and should NOT trigger the
    # ``migrate`` default.
    _GROUP_FLAGS: ClassVar[set[str]] = {"--help", "--version", "-h"}

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        """Rewrite the positional ``ORG [retry]`` form into a subcommand call.

        Args:
            ctx: The current Click context.
            args: Raw CLI argument list.

        Returns:
            The (possibly modified) argument list for further parsing.
        """
        # If no args at all, let click show help as usual.
        if args and args[0] not in self.commands and args[0] not in self._GROUP_FLAGS:
            if args[0].startswith("-"):
                args = ["migrate", *args]
            elif len(args) > 1 and args[1] == "retry":
                args = ["retry", args[0], *args[2:]]
            else:
                args = ["migrate", *args]
        return super().parse_args(ctx, args)


# ---------------------------------------------------------------------------
# Shared option decorator
# ---------------------------------------------------------------------------


def common_options(f: Callable[..., None]) -> Callable[..., None]:
    """Decorator that adds options shared across the run subcommands.

    Args:
        f: The Click command function to decorate.

    Returns:
        The decorated function with common options attached.
    """
    f = click.option(
        "--config",
        default=".dev.vars",
        show_default=True,
        help="Path to config file (YAML or JSON)",
    )(f)
    f = click.option(
        "--verbose",
        "-v",
        is_flag=True,
        default=False,
        help="Enable verbose console logging (shows DEBUG level messages)",
    )(f)
    f = click.option(
        "--no_progress",
        is_flag=True,
        default=False,
        help="Disable the progress bar",
    )(f)
    f = click.option(
        "--json_logs",
        is_flag=True,
        default=False,
        help="Write console log lines as JSON objects",
    )(f)
    return f


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(
    cls=DefaultGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=content_migrator.__version__, prog_name="content-migrator")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Object store content migration tool.

    Args:
        ctx: The Click context (injected by ``@click.pass_context``).
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------


def handle_exception(e: BaseException) -> None:
    """Log a fatal error naming the phase that failed.

    Args:
        e: The exception to handle.
    """
    if isinstance(e, NotFoundError):
        log_with_context(logging.ERROR, f"Nothing to retry: {e}", phase=e.phase)
    elif isinstance(e, MigratorError):
        log_with_context(logging.ERROR, f"{e.phase.capitalize()} failed: {e}", phase=e.phase)
        if e.phase == "persistence":
            log_with_context(
                logging.INFO,
                "Copied objects are not recorded anywhere; verify the destination manually.",
            )
        elif e.phase == "listing":
            log_with_context(
                logging.INFO, "No status was written. Rerun the migration from the beginning."
            )
    elif isinstance(e, KeyboardInterrupt):
        log_with_context(logging.WARNING, "Migration interrupted by user.")
        log_with_context(
            logging.INFO, "No status was written for the interrupted run."
        )
    else:
        log_with_context(logging.ERROR, f"Migration failed: {e}", exc_info=True)
