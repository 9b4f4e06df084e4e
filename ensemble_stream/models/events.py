"""Canonical event models for streaming responses.

Every provider stream is translated into this vocabulary. Consumers only
ever see these six event types, whatever the vendor wire format was.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Union
import time


@dataclass
class ToolCall:
    """A function call requested by the model."""
    id: str
    call_id: str
    name: str
    arguments: str = ""
    status: str = "pending"  # pending | complete | incomplete
    type: str = "function"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StreamEvent:
    """Base class for all canonical events."""
    type: str = ""  # Will be set by subclasses
    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary, dropping unset optionals."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {}}


@dataclass
class MessageDeltaEvent(StreamEvent):
    """A fragment of user-visible content for one message item."""
    type: str = field(default="message_delta", init=False)
    content: str = ""
    message_id: str = ""
    order: int = 0

    def __post_init__(self):
        self.type = "message_delta"


@dataclass
class MessageCompleteEvent(StreamEvent):
    """Final content for one message item."""
    type: str = field(default="message_complete", init=False)
    content: str = ""
    message_id: str = ""
    thinking_content: Optional[str] = None

    def __post_init__(self):
        self.type = "message_complete"


@dataclass
class ThinkingDeltaEvent(StreamEvent):
    """A fragment of reasoning content for one reasoning composite id."""
    type: str = field(default="thinking_delta", init=False)
    thinking_content: str = ""
    message_id: str = ""
    order: int = 0

    def __post_init__(self):
        self.type = "thinking_delta"


@dataclass
class ThinkingCompleteEvent(StreamEvent):
    """Final reasoning content for one reasoning composite id."""
    type: str = field(default="thinking_complete", init=False)
    thinking_content: str = ""
    message_id: str = ""
    thinking_signature: Optional[str] = None

    def __post_init__(self):
        self.type = "thinking_complete"


@dataclass
class ToolStartEvent(StreamEvent):
    """A fully assembled (or best-effort) tool call."""
    type: str = field(default="tool_start", init=False)
    tool_call: Optional[ToolCall] = None

    def __post_init__(self):
        self.type = "tool_start"


@dataclass
class ErrorEvent(StreamEvent):
    """A failure surfaced to the caller in place of an exception."""
    type: str = field(default="error", init=False)
    error: str = ""
    code: Optional[str] = None
    recoverable: bool = False

    def __post_init__(self):
        self.type = "error"


CanonicalEvent = Union[
    MessageDeltaEvent,
    MessageCompleteEvent,
    ThinkingDeltaEvent,
    ThinkingCompleteEvent,
    ToolStartEvent,
    ErrorEvent,
]
