"""Configuration for Photo Stack.

Settings are read from PHOTOSTACK_* environment variables:

    PHOTOSTACK_LOG_LEVEL         debug, info, warning or error
    PHOTOSTACK_LOG_FORMAT        text or json
    PHOTOSTACK_LOG_FILE          log file path (stderr when unset)
    PHOTOSTACK_REGEX_CACHE_SIZE  compiled patterns kept by the regex cache
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from photostack.config.env import EnvReader
from photostack.config.models import LoggingConfig, StackerConfig
from photostack.criteria.matchers import DEFAULT_CACHE_SIZE

logger = logging.getLogger(__name__)

__all__ = [
    "EnvReader",
    "LoggingConfig",
    "StackerConfig",
    "get_config",
]


def get_config(env: Mapping[str, str] | None = None) -> StackerConfig:
    """Build the configuration from environment variables.

    Args:
        env: Optional mapping to use instead of os.environ.

    Returns:
        StackerConfig with defaults for anything not set.

    Raises:
        ValueError: If a logging setting has an invalid value.
    """
    reader = EnvReader(env=env)

    logging_config = LoggingConfig(
        level=reader.get_str("PHOTOSTACK_LOG_LEVEL", "info") or "info",
        file=reader.get_path("PHOTOSTACK_LOG_FILE"),
        format=reader.get_str("PHOTOSTACK_LOG_FORMAT", "text") or "text",
    )

    cache_size = reader.get_int("PHOTOSTACK_REGEX_CACHE_SIZE", DEFAULT_CACHE_SIZE)
    if cache_size is None or cache_size < 1:
        logger.warning(
            "PHOTOSTACK_REGEX_CACHE_SIZE must be at least 1, using %d",
            DEFAULT_CACHE_SIZE,
        )
        cache_size = DEFAULT_CACHE_SIZE

    return StackerConfig(logging=logging_config, regex_cache_size=cache_size)
