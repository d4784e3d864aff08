"""Worker context for log records.

Key building workers run each batch inside worker_context(), and
WorkerContextFilter copies the current worker and batch onto every record.
The context lives in a ContextVar, so each thread sees only its own.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


@dataclass(frozen=True)
class WorkerContext:
    """The worker and batch a log record was emitted from."""

    worker_id: str | None = None
    batch_id: str | None = None

    @property
    def tag(self) -> str:
        """Text prefix such as "[W01:B003] ", or "" outside a worker."""
        if not self.worker_id:
            return ""
        if self.batch_id:
            return f"[W{self.worker_id}:{self.batch_id}] "
        return f"[W{self.worker_id}] "


_NO_CONTEXT = WorkerContext()

_current: contextvars.ContextVar[WorkerContext] = contextvars.ContextVar(
    "photostack_worker_context", default=_NO_CONTEXT
)


def get_worker_context() -> tuple[str | None, str | None]:
    """Return (worker_id, batch_id); either may be None."""
    context = _current.get()
    return context.worker_id, context.batch_id


@contextmanager
def worker_context(worker_id: str, batch_id: str | None = None) -> Iterator[None]:
    """Run a block as worker_id working on batch_id.

    The previous context is restored on exit, including on error.
    """
    token = _current.set(WorkerContext(worker_id, batch_id))
    try:
        yield
    finally:
        _current.reset(token)


class WorkerContextFilter(logging.Filter):
    """Adds worker_id, batch_id and worker_tag to every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _current.get()
        record.worker_id = context.worker_id
        record.batch_id = context.batch_id
        record.worker_tag = context.tag
        return True
