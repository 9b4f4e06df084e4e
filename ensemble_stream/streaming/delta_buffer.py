"""
Adaptive delta buffering.

Coalesces small visible-content fragments into fewer, larger emissions.
A buffer flushes when its pending text reaches the current threshold or
when the flush interval has passed since the last flush. Each flush raises
the threshold by ``step`` up to ``max_threshold``, so a long fast stream
settles into larger chunks.
"""

import time
from typing import Callable, Dict, List, Optional, TypeVar

from ..config import constants

T = TypeVar("T")


class DeltaBuffer:
    """Buffer for one identifier's visible deltas."""

    def __init__(
        self,
        threshold: int = constants.DELTA_INITIAL_THRESHOLD,
        max_threshold: int = constants.DELTA_MAX_THRESHOLD,
        step: int = constants.DELTA_THRESHOLD_STEP,
        time_limit_ms: int = constants.DELTA_FLUSH_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.threshold = threshold
        self.max_threshold = max_threshold
        self.step = step
        self.time_limit = time_limit_ms / 1000.0
        self._clock = clock
        self._pending: List[str] = []
        self._pending_len = 0
        self._last_flush = clock()

    @property
    def pending(self) -> str:
        return "".join(self._pending)

    def add(self, chunk: str) -> Optional[str]:
        """Add a chunk; return the coalesced text when a flush is due."""
        if not chunk:
            return None

        self._pending.append(chunk)
        self._pending_len += len(chunk)

        if self._pending_len >= self.threshold:
            return self._flush()
        if self._clock() - self._last_flush >= self.time_limit:
            return self._flush()
        return None

    def flush(self) -> Optional[str]:
        """Return any pending text, or None when nothing is pending."""
        if not self._pending:
            return None
        return self._flush()

    def _flush(self) -> str:
        content = "".join(self._pending)
        self._pending = []
        self._pending_len = 0
        self._last_flush = self._clock()
        self.threshold = min(self.threshold + self.step, self.max_threshold)
        return content


def buffer_delta(
    store: Dict[str, DeltaBuffer],
    item_id: str,
    delta: str,
    make_event: Callable[[str], T],
    factory: Callable[[], DeltaBuffer] = DeltaBuffer,
) -> List[T]:
    """Feed ``delta`` to the buffer for ``item_id``, creating it on first use.

    Returns zero or one events built with ``make_event``.
    """
    buffer = store.get(item_id)
    if buffer is None:
        buffer = store[item_id] = factory()
    content = buffer.add(delta)
    if content is None:
        return []
    return [make_event(content)]


def flush_buffered_deltas(
    store: Dict[str, DeltaBuffer],
    make_event: Callable[[str, str], T],
) -> List[T]:
    """Flush every buffer in ``store`` and clear it.

    ``make_event`` receives ``(item_id, content)`` for each non-empty buffer.
    """
    events = []
    for item_id, buffer in store.items():
        content = buffer.flush()
        if content:
            events.append(make_event(item_id, content))
    store.clear()
    return events
