"""Data models for Ensemble Stream."""

from .conversation_types import (
    ConversationItem,
    ConversationMessage,
    FunctionCallItem,
    FunctionCallOutputItem,
    ThinkingItem,
    TurnRole,
    parse_conversation,
)
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
from .usage import UsageRecord

__all__ = [
    "ConversationItem",
    "ConversationMessage",
    "FunctionCallItem",
    "FunctionCallOutputItem",
    "ThinkingItem",
    "TurnRole",
    "parse_conversation",
    "ErrorEvent",
    "MessageCompleteEvent",
    "MessageDeltaEvent",
    "StreamEvent",
    "ThinkingCompleteEvent",
    "ThinkingDeltaEvent",
    "ToolCall",
    "ToolStartEvent",
    "UsageRecord",
]
