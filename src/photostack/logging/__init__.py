"""Logging setup for Photo Stack.

Text or JSON output, an optional rotating log file, and worker/batch
context for records emitted while keying batches in parallel.
"""

from photostack.logging.config import configure_logging
from photostack.logging.context import (
    WorkerContext,
    WorkerContextFilter,
    get_worker_context,
    worker_context,
)
from photostack.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "WorkerContext",
    "WorkerContextFilter",
    "configure_logging",
    "get_worker_context",
    "worker_context",
]
