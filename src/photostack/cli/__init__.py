"""CLI module for Photo Stack."""

import logging
from pathlib import Path

import click

from photostack.cli.exit_codes import ExitCode

logger = logging.getLogger(__name__)


def _configure_logging(
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Configure logging from CLI options.

    Args:
        log_level: Override log level (debug, info, warning, error).
        log_file: Override log file path.
        log_json: Use JSON log format.
    """
    from photostack.config.logging_factory import configure_logging_from_cli

    try:
        configure_logging_from_cli(
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ValueError as e:
        click.echo(f"Error: Invalid logging configuration: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from e


@click.group()
@click.version_option(package_name="photostack")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Photo Stack - validate and inspect file stacking criteria."""
    ctx.ensure_object(dict)
    _configure_logging(log_level, log_file, log_json)


def _register_commands() -> None:
    from photostack.cli.criteria import criteria_group

    main.add_command(criteria_group)


_register_commands()

__all__ = ["ExitCode", "main"]
