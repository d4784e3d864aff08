"""Root logger setup for the photostack CLI."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

from photostack.logging.context import WorkerContextFilter
from photostack.logging.handlers import JSONFormatter

if TYPE_CHECKING:
    from photostack.config.models import LoggingConfig

# worker_tag is "[W01:B003] " inside a worker context and empty otherwise
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(worker_tag)s%(name)s: %(message)s"
TEXT_DATEFMT = "%H:%M:%S"


def _make_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format.casefold() == "json":
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def _open_log_file(config: LoggingConfig) -> logging.Handler | None:
    """Open the rotating log file, or return None if it cannot be opened."""
    if config.file is None:
        return None

    path = config.file.expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Point the root logger at the configured destinations.

    Existing root handlers are replaced. Records go to the log file when one
    is configured and can be opened, and to stderr when include_stderr is
    set or there is no usable file.
    """
    level = logging.getLevelName(config.level.upper())

    handlers: list[logging.Handler] = []
    file_handler = _open_log_file(config)
    if file_handler is not None:
        handlers.append(file_handler)
    if config.include_stderr or file_handler is None:
        handlers.append(logging.StreamHandler(sys.stderr))

    formatter = _make_formatter(config)
    context_filter = WorkerContextFilter()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(context_filter)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
