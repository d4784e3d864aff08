"""Parallel group key construction.

Rows of extracted values are split into batches and keyed by a pool of
worker threads. Each batch gets its own KeyBuilder and runs inside a worker
logging context, so its log lines carry a [W01:B003] style tag.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from photostack.criteria.keys import KeyBuilder
from photostack.logging.context import worker_context

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


def _key_batch(
    rows: Sequence[Sequence[str]], worker_id: str, batch_id: str
) -> list[str]:
    with worker_context(worker_id, batch_id), KeyBuilder() as builder:
        logger.debug("Keying %d row(s)", len(rows))
        return [builder.build(row) for row in rows]


def build_group_keys(
    rows: Sequence[Sequence[str]],
    *,
    workers: int = 1,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> list[str]:
    """Build the group key of every row.

    Args:
        rows: Value rows, each in criteria declaration order.
        workers: Number of worker threads.
        batch_size: Rows handed to a worker at a time.

    Returns:
        One key per row, in input order regardless of worker scheduling.

    Raises:
        ValueError: If workers or batch_size is less than 1.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    batches = [rows[i : i + batch_size] for i in range(0, len(rows), batch_size)]
    if not batches:
        return []

    effective_workers = min(workers, len(batches))
    batch_id_width = len(str(len(batches)))
    logger.debug(
        "Keying %d row(s) in %d batch(es) with %d worker(s)",
        len(rows),
        len(batches),
        effective_workers,
    )

    keys: list[str] = []
    if effective_workers == 1:
        for batch_idx, batch in enumerate(batches, start=1):
            batch_id = f"B{batch_idx:0{batch_id_width}d}"
            keys.extend(_key_batch(batch, "01", batch_id))
        return keys

    with ThreadPoolExecutor(max_workers=effective_workers) as executor:
        # Worker ids are nominal labels for log correlation, assigned round
        # robin; the executor decides which thread runs each batch.
        futures = []
        for batch_idx, batch in enumerate(batches, start=1):
            worker_id = f"{((batch_idx - 1) % effective_workers) + 1:02d}"
            batch_id = f"B{batch_idx:0{batch_id_width}d}"
            futures.append(executor.submit(_key_batch, batch, worker_id, batch_id))

        for future in futures:
            keys.extend(future.result())

    return keys
