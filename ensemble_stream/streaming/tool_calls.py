"""
Tool-call assembly.

A function call streams as "added" (name and call id), any number of
argument deltas, then "done" with the final argument string. Each call
moves absent -> pending -> finalized and produces exactly one ToolCall.
Finalized ids are terminal: later signals for them are logged and ignored.
"""

import logging
from typing import Dict, List, Optional, Set

from ..models.events import ToolCall

logger = logging.getLogger(__name__)


class ToolCallAssembler:
    """Tracks in-flight tool calls keyed by vendor item id."""

    def __init__(self):
        self._pending: Dict[str, ToolCall] = {}
        self._finalized: Set[str] = set()

    @property
    def pending(self) -> Dict[str, ToolCall]:
        return dict(self._pending)

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, item_id: str, call_id: str, name: str) -> None:
        if item_id in self._finalized:
            logger.warning("Tool call %s already finalized, ignoring repeated add", item_id)
            return
        if item_id in self._pending:
            logger.warning("Tool call %s already pending, ignoring duplicate add", item_id)
            return
        self._pending[item_id] = ToolCall(
            id=item_id,
            call_id=call_id or item_id,
            name=name or "",
        )

    def append_arguments(self, item_id: str, delta: str) -> None:
        call = self._pending.get(item_id)
        if call is None:
            if item_id in self._finalized:
                logger.warning("Argument delta for finalized tool call %s dropped", item_id)
                return
            logger.warning("Argument delta for unknown tool call %s dropped", item_id)
            return
        call.arguments += delta

    def finish(self, item_id: str, arguments: Optional[str] = None) -> Optional[ToolCall]:
        """Finalize a call. ``arguments`` replaces the accumulated deltas when given."""
        call = self._pending.pop(item_id, None)
        if call is None:
            if item_id in self._finalized:
                logger.warning("Repeated done signal for tool call %s dropped", item_id)
                return None
            logger.warning("Done signal for unknown tool call %s dropped", item_id)
            return None
        if arguments is not None:
            call.arguments = arguments
        self._finalized.add(item_id)
        call.status = "complete"
        return call

    def drain(self) -> List[ToolCall]:
        """Flush calls left pending at stream end as best-effort results.

        Calls that never received a name are discarded.
        """
        flushed = []
        for item_id, call in self._pending.items():
            self._finalized.add(item_id)
            if not call.name:
                logger.warning("Discarding unnamed incomplete tool call %s", item_id)
                continue
            logger.warning(
                "Tool call %s (%s) incomplete at stream end, emitting partial arguments",
                item_id, call.name,
            )
            call.status = "incomplete"
            flushed.append(call)
        self._pending.clear()
        return flushed
