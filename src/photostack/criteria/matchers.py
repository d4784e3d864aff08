"""Shared regex compilation cache.

Criteria patterns are compiled once per process and reused by every worker.
The cache is keyed by the exact pattern string and bounded with LRU eviction
so long-running processes with changing criteria do not grow without limit.
"""

from __future__ import annotations

import logging
import re
import threading
from collections import OrderedDict
from re import Pattern
from typing import Protocol

logger = logging.getLogger(__name__)

# Default number of compiled patterns kept before evicting
DEFAULT_CACHE_SIZE = 1000


class RegexCompiler(Protocol):
    """Anything that compiles a pattern string, memoized by pattern."""

    def compile(self, pattern: str) -> Pattern[str]: ...


class RegexCache:
    """Thread-safe LRU cache of compiled regular expressions.

    Lookup, compilation and insertion happen under one lock, so two workers
    requesting the same uncompiled pattern see exactly one compilation and
    neither receives a partially constructed entry. Compilation failures are
    cached as well; a malformed pattern cannot become valid by retrying.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize the cache.

        Args:
            capacity: Maximum number of cached patterns before evicting the
                least recently used one.

        Raises:
            ValueError: If capacity is less than 1.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[str, Pattern[str] | re.error] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def compile(self, pattern: str) -> Pattern[str]:
        """Return the compiled pattern, compiling it on first use.

        Args:
            pattern: Regex pattern string.

        Returns:
            Compiled pattern.

        Raises:
            re.error: If the pattern is invalid.
        """
        with self._lock:
            entry = self._entries.get(pattern)
            if entry is not None:
                self._entries.move_to_end(pattern)
                self.hits += 1
            else:
                self.misses += 1
                try:
                    entry = re.compile(pattern)
                except re.error as e:
                    entry = e
                self._put(pattern, entry)

        if isinstance(entry, re.error):
            raise re.error(entry.msg, entry.pattern, entry.pos)
        return entry

    def _put(self, pattern: str, entry: Pattern[str] | re.error) -> None:
        """Insert an entry, evicting the least recently used one if full."""
        if len(self._entries) >= self._capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted regex from cache: %r", evicted)
        self._entries[pattern] = entry

    def clear(self) -> None:
        """Drop every cached entry and reset the counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, pattern: object) -> bool:
        with self._lock:
            return pattern in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_default_cache: RegexCache | None = None
_default_cache_lock = threading.Lock()


def get_regex_cache() -> RegexCache:
    """Get the process-wide regex cache, creating it on first use.

    The capacity comes from the PHOTOSTACK_REGEX_CACHE_SIZE setting.
    """
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            from photostack.config import get_config

            _default_cache = RegexCache(get_config().regex_cache_size)
        return _default_cache


def reset_regex_cache() -> None:
    """Discard the process-wide cache. Intended for tests."""
    global _default_cache
    with _default_cache_lock:
        _default_cache = None


def compile_regex(pattern: str) -> Pattern[str]:
    """Compile a pattern through the process-wide cache.

    Raises:
        re.error: If the pattern is invalid.
    """
    return get_regex_cache().compile(pattern)
