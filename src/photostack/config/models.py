"""Configuration models for Photo Stack."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from photostack.criteria.matchers import DEFAULT_CACHE_SIZE


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    # Log level: debug, info, warning, error
    level: str = "info"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    # Rotation threshold in bytes (default 10MB)
    max_bytes: int = 10_485_760

    # Number of rotated files to keep
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate configuration."""
        valid_levels = {"debug", "info", "warning", "error"}
        if self.level.lower() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got {self.level}")
        valid_formats = {"text", "json"}
        if self.format.lower() not in valid_formats:
            raise ValueError(
                f"format must be one of {valid_formats}, got {self.format}"
            )


@dataclass
class StackerConfig:
    """Top-level configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Compiled patterns kept by the shared regex cache
    regex_cache_size: int = DEFAULT_CACHE_SIZE

    def __post_init__(self) -> None:
        if self.regex_cache_size < 1:
            raise ValueError(
                f"regex_cache_size must be at least 1, got {self.regex_cache_size}"
            )
