"""Eager regex warm-up for criteria.

Run once per loaded configuration, before any per-item matching, so that a
malformed pattern stops the run instead of surfacing midway through a batch.

Usage:
    from photostack.criteria.precompile import precompile_regexes

    config = parse_criteria(text)
    precompile_regexes(config.source)
"""

from __future__ import annotations

import logging
import re

from photostack.criteria.exceptions import RegexCompilationError
from photostack.criteria.matchers import RegexCompiler, get_regex_cache
from photostack.criteria.models import Criterion
from photostack.criteria.traversal import criteria_source, iter_source_criteria

logger = logging.getLogger(__name__)


def precompile_criterion_regex(criterion: Criterion, cache: RegexCompiler) -> bool:
    """Compile a criterion's regex pattern, if it has one.

    Args:
        criterion: The criterion to warm up.
        cache: Cache to compile through.

    Returns:
        True if a pattern was submitted to the cache, False if the criterion
        has no regex or an empty pattern.

    Raises:
        RegexCompilationError: If the pattern is invalid.
    """
    if criterion.regex is None or not criterion.regex.pattern:
        return False

    pattern = criterion.regex.pattern
    try:
        cache.compile(pattern)
    except re.error as e:
        logger.error(
            "Invalid regex for criteria key %s: %r (%s)",
            criterion.key,
            pattern,
            e,
            extra={"criteria_key": criterion.key, "pattern": pattern},
        )
        raise RegexCompilationError(pattern, e) from e
    return True


def precompile_regexes(source: object, cache: RegexCompiler | None = None) -> None:
    """Compile every regex pattern reachable from a criteria source.

    Leaves are visited in order: a flat list in sequence, groups one after
    another, and expression trees depth-first left to right. The first
    invalid pattern aborts the pass; later patterns are not submitted.

    Args:
        source: A criteria source variant, or a bare criterion, a sequence of
            criteria, a sequence of groups, an expression or None.
        cache: Cache to compile through. Defaults to the process-wide cache.

    Raises:
        RegexCompilationError: On the first pattern that fails to compile.
        UnsupportedCriteriaSourceError: If source has no recognized shape.
    """
    tagged = criteria_source(source)
    compiler = cache if cache is not None else get_regex_cache()

    compiled = 0
    for criterion in iter_source_criteria(tagged):
        if precompile_criterion_regex(criterion, compiler):
            compiled += 1

    logger.debug(
        "Precompiled %d regex pattern(s) from %s", compiled, type(tagged).__name__
    )
