"""Shared test fixtures for Photo Stack."""

import logging
import re
from re import Pattern

import pytest
from click.testing import CliRunner

from photostack.criteria import RegexCache, reset_regex_cache


class RecordingRegexCache:
    """Regex cache double that logs every pattern submitted to it.

    Delegates to a real RegexCache so memoization behaves as in production,
    and counts how many submissions were served from the cache.
    """

    def __init__(self) -> None:
        self._cache = RegexCache()
        self.submitted: list[str] = []

    def compile(self, pattern: str) -> Pattern[str]:
        self.submitted.append(pattern)
        return self._cache.compile(pattern)

    @property
    def hits(self) -> int:
        return self._cache.hits

    @property
    def compilations(self) -> int:
        return self._cache.misses

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._cache


@pytest.fixture
def recording_cache() -> RecordingRegexCache:
    """A fresh recording regex cache."""
    return RecordingRegexCache()


@pytest.fixture(autouse=True)
def _isolate_regex_cache():
    """Give every test its own process-wide regex cache."""
    reset_regex_cache()
    yield
    reset_regex_cache()


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def invalid_pattern() -> str:
    """A pattern the re module refuses to compile."""
    pattern = "[invalid"
    with pytest.raises(re.error):
        re.compile(pattern)
    return pattern


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by configure_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
