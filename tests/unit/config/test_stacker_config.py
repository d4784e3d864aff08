"""Tests for environment configuration and logging overrides."""

import logging
from pathlib import Path

import pytest

from photostack.config import LoggingConfig, StackerConfig, get_config
from photostack.config.logging_factory import build_logging_config
from photostack.criteria.matchers import DEFAULT_CACHE_SIZE


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "info"
        assert config.format == "text"
        assert config.file is None

    def test_level_is_case_insensitive(self) -> None:
        assert LoggingConfig(level="DEBUG").level == "DEBUG"

    def test_invalid_level(self) -> None:
        with pytest.raises(ValueError, match="level must be one of"):
            LoggingConfig(level="loud")

    def test_invalid_format(self) -> None:
        with pytest.raises(ValueError, match="format must be one of"):
            LoggingConfig(format="xml")


class TestStackerConfig:
    def test_default_cache_size(self) -> None:
        assert StackerConfig().regex_cache_size == DEFAULT_CACHE_SIZE

    def test_cache_size_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="regex_cache_size"):
            StackerConfig(regex_cache_size=0)


class TestGetConfig:
    def test_defaults_from_empty_environment(self) -> None:
        config = get_config(env={})

        assert config.logging.level == "info"
        assert config.logging.format == "text"
        assert config.logging.file is None
        assert config.regex_cache_size == DEFAULT_CACHE_SIZE

    def test_reads_environment(self, tmp_path: Path) -> None:
        log_file = tmp_path / "photostack.log"
        config = get_config(
            env={
                "PHOTOSTACK_LOG_LEVEL": "debug",
                "PHOTOSTACK_LOG_FORMAT": "json",
                "PHOTOSTACK_LOG_FILE": str(log_file),
                "PHOTOSTACK_REGEX_CACHE_SIZE": "64",
            }
        )

        assert config.logging.level == "debug"
        assert config.logging.format == "json"
        assert config.logging.file == log_file
        assert config.regex_cache_size == 64

    @pytest.mark.parametrize("value", ["0", "-5", "many"])
    def test_invalid_cache_size_uses_default(self, value: str, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            config = get_config(env={"PHOTOSTACK_REGEX_CACHE_SIZE": value})

        assert config.regex_cache_size == DEFAULT_CACHE_SIZE
        assert "PHOTOSTACK_REGEX_CACHE_SIZE" in caplog.text

    def test_invalid_log_level_raises(self) -> None:
        with pytest.raises(ValueError):
            get_config(env={"PHOTOSTACK_LOG_LEVEL": "loud"})


class TestBuildLoggingConfig:
    def test_no_overrides_keeps_base(self) -> None:
        base = LoggingConfig(level="warning", format="json", backup_count=2)
        assert build_logging_config(base) == base

    def test_overrides_applied(self, tmp_path: Path) -> None:
        base = LoggingConfig(level="warning", max_bytes=1024)
        result = build_logging_config(
            base, level="debug", file=tmp_path / "a.log", format="json"
        )

        assert result.level == "debug"
        assert result.file == tmp_path / "a.log"
        assert result.format == "json"
        assert result.max_bytes == 1024

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(ValueError):
            build_logging_config(LoggingConfig(), format="xml")
