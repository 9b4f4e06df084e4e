"""
Ensemble Stream - canonical streaming events across LLM providers.

This package turns the native streaming protocols of:
- OpenAI (Responses API)
- Anthropic (Messages API)

into one ordered vocabulary of message, thinking, tool-call and error
events.

Features:
- Adaptive delta buffering with per-message ordering
- Tool-call assembly from streamed argument fragments
- Reasoning side-channel and citation footnotes
- Strict-mode tool schema translation
- Cooperative pause/resume and cancellation
- Usage records forwarded to a cost ledger
"""

__version__ = "0.1.0"

from .agents import AgentDefinition, ModelSettings, ToolFunction
from .api.client import EnsembleClient, stream_response
from .core.pause import PauseController, get_pause_controller
from .errors import EnsembleError, PauseAbortError, ProviderError, SchemaTranslationError
from .models.conversation_types import (
    ConversationMessage,
    FunctionCallItem,
    FunctionCallOutputItem,
    ThinkingItem,
    TurnRole,
)
from .models.events import (
    ErrorEvent,
    MessageCompleteEvent,
    MessageDeltaEvent,
    StreamEvent,
    ThinkingCompleteEvent,
    ThinkingDeltaEvent,
    ToolCall,
    ToolStartEvent,
)
from .models.generation import StreamResult
from .models.streaming import StreamingOptions
from .models.usage import UsageRecord

__all__ = [
    # Main client
    "EnsembleClient",
    "stream_response",
    "StreamResult",

    # Agent definition
    "AgentDefinition",
    "ModelSettings",
    "ToolFunction",

    # Conversation items
    "ConversationMessage",
    "FunctionCallItem",
    "FunctionCallOutputItem",
    "ThinkingItem",
    "TurnRole",

    # Events
    "StreamEvent",
    "MessageDeltaEvent",
    "MessageCompleteEvent",
    "ThinkingDeltaEvent",
    "ThinkingCompleteEvent",
    "ToolStartEvent",
    "ErrorEvent",
    "ToolCall",

    # Runtime services
    "PauseController",
    "get_pause_controller",
    "StreamingOptions",
    "UsageRecord",

    # Errors
    "EnsembleError",
    "PauseAbortError",
    "ProviderError",
    "SchemaTranslationError",
]
