"""
Reasoning channel.

Reasoning summaries stream under a composite id ``<item_id>-<summary_index>``
with their own order counters, separate from visible content.
"""

import logging
from typing import Dict, List, Optional

from ..models.events import ThinkingCompleteEvent, ThinkingDeltaEvent

logger = logging.getLogger(__name__)


def composite_id(item_id: str, summary_index: int) -> str:
    return f"{item_id}-{summary_index}"


class ReasoningChannel:
    """Per-stream reasoning state: order counters and open aggregates."""

    def __init__(self):
        self._positions: Dict[str, int] = {}
        self._open: Dict[str, List[str]] = {}
        self._by_item: Dict[str, List[str]] = {}

    def delta(self, item_id: str, summary_index: int, text: str) -> Optional[ThinkingDeltaEvent]:
        if not text:
            return None
        key = composite_id(item_id, summary_index)
        order = self._positions.get(key, 0)
        self._positions[key] = order + 1
        self._open.setdefault(key, []).append(text)
        self._by_item.setdefault(item_id, []).append(text)
        return ThinkingDeltaEvent(thinking_content=text, message_id=key, order=order)

    def done(
        self,
        item_id: str,
        summary_index: int,
        text: Optional[str] = None,
        signature: Optional[str] = None,
    ) -> ThinkingCompleteEvent:
        """Close one composite. The streamed aggregate wins over the vendor text."""
        key = composite_id(item_id, summary_index)
        streamed = "".join(self._open.pop(key, []))
        if not streamed and text:
            self._by_item.setdefault(item_id, []).append(text)
        return ThinkingCompleteEvent(
            thinking_content=streamed or text or "",
            message_id=key,
            thinking_signature=signature,
        )

    def empty_item(self, item_id: str) -> ThinkingCompleteEvent:
        """A reasoning item that finished without any summary."""
        return ThinkingCompleteEvent(thinking_content="", message_id=composite_id(item_id, 0))

    def thinking_for(self, item_id: str) -> Optional[str]:
        """All reasoning streamed under ``item_id``, or None if there was none."""
        parts = self._by_item.get(item_id)
        return "".join(parts) if parts else None

    def drain(self) -> List[ThinkingCompleteEvent]:
        """Complete every composite that was still open at stream end."""
        events = []
        for key, parts in self._open.items():
            logger.debug("Closing unfinished reasoning summary %s", key)
            events.append(ThinkingCompleteEvent(thinking_content="".join(parts), message_id=key))
        self._open.clear()
        return events
