"""Aggregated result of a canonical event stream."""

from typing import Dict, List, Optional

from .events import (
    ErrorEvent,
    MessageCompleteEvent,
    MessageDeltaEvent,
    StreamEvent,
    ThinkingCompleteEvent,
    ThinkingDeltaEvent,
    ToolCall,
    ToolStartEvent,
)


class StreamResult:
    """Collects canonical events into per-message text, thinking and tool calls."""

    def __init__(self):
        self.events: List[StreamEvent] = []
        self.chunks: Dict[str, List[str]] = {}
        self.messages: Dict[str, str] = {}
        self.thinking: Dict[str, str] = {}
        self.tool_calls: List[ToolCall] = []
        self.errors: List[str] = []
        self.model: Optional[str] = None
        self.provider: Optional[str] = None

    def add(self, event: StreamEvent):
        """Add one event to the result."""
        self.events.append(event)
        self.model = event.model or self.model
        self.provider = event.provider or self.provider

        if isinstance(event, MessageDeltaEvent):
            self.chunks.setdefault(event.message_id, []).append(event.content)
        elif isinstance(event, MessageCompleteEvent):
            self.messages[event.message_id] = event.content
        elif isinstance(event, ThinkingDeltaEvent):
            self.thinking[event.message_id] = self.thinking.get(event.message_id, "") + event.thinking_content
        elif isinstance(event, ThinkingCompleteEvent):
            self.thinking[event.message_id] = event.thinking_content
        elif isinstance(event, ToolStartEvent) and event.tool_call is not None:
            self.tool_calls.append(event.tool_call)
        elif isinstance(event, ErrorEvent):
            self.errors.append(event.error)

    def get_text(self) -> str:
        """Final text of every message, falling back to streamed deltas."""
        parts = []
        for message_id in dict.fromkeys(list(self.chunks) + list(self.messages)):
            if message_id in self.messages:
                parts.append(self.messages[message_id])
            else:
                parts.append("".join(self.chunks[message_id]))
        return "".join(parts)

    def get_thinking(self) -> str:
        return "\n".join(text for text in self.thinking.values() if text)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def __iter__(self):
        """Allow iteration over collected events."""
        return iter(self.events)
