"""Environment variable reader with dependency injection support.

This module provides the EnvReader class for reading and parsing environment
variables with type conversion. It accepts an optional env mapping so code
that depends on environment variables can be tested without os.environ.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)


class EnvReader:
    """Environment variable reader with type conversion.

    Example:
        # Production usage (reads from os.environ)
        reader = EnvReader()
        size = reader.get_int("PHOTOSTACK_REGEX_CACHE_SIZE", 1000)

        # Testing usage (inject custom env)
        reader = EnvReader(env={"PHOTOSTACK_REGEX_CACHE_SIZE": "50"})
        size = reader.get_int("PHOTOSTACK_REGEX_CACHE_SIZE", 1000)  # Returns 50
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string from environment variable.

        Args:
            var: Environment variable name.
            default: Default value if not set. Defaults to None.

        Returns:
            The environment variable value, or default if not set.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Get an integer from environment variable.

        Args:
            var: Environment variable name.
            default: Default value if not set or invalid.

        Returns:
            Parsed integer value, or default if not set or invalid.
            Logs a warning if the value is set but cannot be parsed.
        """
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path from environment variable, with tilde expansion.

        An empty value is treated as not set.
        """
        value = self._env.get(var)
        if not value:
            return default
        return Path(value).expanduser()
