"""Custom exceptions for criteria operations."""

from __future__ import annotations

import re


class CriteriaError(Exception):
    """Base class for criteria-related errors."""

    pass


class RegexCompilationError(CriteriaError):
    """Raised when a criterion's regex pattern fails to compile.

    A malformed pattern blocks the run before any matching starts, so this
    is never retried.
    """

    def __init__(self, pattern: str, cause: re.error) -> None:
        """Initialize the error.

        Args:
            pattern: The offending pattern text.
            cause: The underlying compiler diagnostic.
        """
        self.pattern = pattern
        self.cause = cause
        super().__init__(f"failed to compile regex {pattern!r}: {cause}")


class UnsupportedCriteriaSourceError(CriteriaError):
    """Raised when a criteria source has none of the recognized shapes.

    This is a programmer error in the calling engine, not a data problem.
    """

    def __init__(self, source: object) -> None:
        self.source = source
        super().__init__(
            f"unsupported criteria source type: {type(source).__name__}"
        )


class CriteriaValidationError(CriteriaError):
    """Error during criteria configuration validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)
