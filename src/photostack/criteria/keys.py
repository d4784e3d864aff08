"""Group key construction.

Per-criterion values extracted from an item are joined into one canonical
key; items sharing a key are stacked together. Values are not escaped, so a
value containing the separator can collide with a longer value tuple
(``["a|b"]`` and ``["a", "b"]`` both yield ``"a|b"``). This matches the keys
existing stacks were built with.
"""

from __future__ import annotations

import io
from collections.abc import Sequence

from photostack.criteria.models import KEY_SEPARATOR


def build_group_key(values: Sequence[str], scratch: io.StringIO | None = None) -> str:
    """Join values in order with the key separator.

    Args:
        values: Extracted values, in criteria declaration order.
        scratch: Optional caller-owned buffer reused across calls. It is
            reset on every call; never share one between threads.

    Returns:
        The group key. An empty sequence yields an empty string.
    """
    if scratch is None:
        return KEY_SEPARATOR.join(values)

    scratch.seek(0)
    scratch.truncate()
    for i, value in enumerate(values):
        if i > 0:
            scratch.write(KEY_SEPARATOR)
        scratch.write(value)
    return scratch.getvalue()


class KeyBuilder:
    """Builds group keys with a buffer owned by one worker.

    Create one per worker thread and keep it for the worker's lifetime.
    """

    def __init__(self) -> None:
        self._scratch = io.StringIO()

    def build(self, values: Sequence[str]) -> str:
        """Build the group key for values. See build_group_key()."""
        return build_group_key(values, self._scratch)

    def close(self) -> None:
        """Release the scratch buffer."""
        self._scratch.close()

    def __enter__(self) -> KeyBuilder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
