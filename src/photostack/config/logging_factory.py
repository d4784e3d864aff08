"""Logging configuration factory.

Builds LoggingConfig instances with CLI overrides applied on top of the
environment configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from photostack.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
) -> LoggingConfig:
    """Merge non-None CLI overrides into a base LoggingConfig.

    Returns:
        New LoggingConfig. Validation runs via LoggingConfig.__post_init__,
        so invalid values raise ValueError.
    """
    return LoggingConfig(
        level=level if level is not None else base.level,
        file=file if file is not None else base.file,
        format=format if format is not None else base.format,
        include_stderr=base.include_stderr,
        max_bytes=base.max_bytes,
        backup_count=base.backup_count,
    )


def configure_logging_from_cli(
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
    env: Mapping[str, str] | None = None,
) -> None:
    """Load the environment configuration, apply overrides and configure logging."""
    from photostack.config import get_config
    from photostack.logging import configure_logging

    config = get_config(env)
    configure_logging(
        build_logging_config(config.logging, level=level, file=file, format=format)
    )
