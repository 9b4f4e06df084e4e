"""Conversation items replayed to a provider as prior context."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TurnRole(str, Enum):
    """Conversation turn roles."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    DEVELOPER = "developer"


class InputItemBase(BaseModel):
    """Fields shared by every conversation item."""
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    id: Optional[str] = None
    model: Optional[str] = Field(None, description="Model that produced this item, if any")
    images: Dict[str, str] = Field(
        default_factory=dict,
        description="Base64 images attached to this item, keyed by image id"
    )


class ConversationMessage(InputItemBase):
    """A plain role/content message."""
    type: Literal["message"] = "message"
    role: TurnRole
    content: Union[str, List[Dict[str, Any]]]
    status: Optional[str] = None


class ThinkingItem(InputItemBase):
    """Reasoning produced by a previous turn."""
    type: Literal["thinking"] = "thinking"
    content: str
    thinking_id: Optional[str] = Field(None, description="Composite reasoning id, e.g. rs_abc-0")
    signature: Optional[str] = None
    role: TurnRole = TurnRole.ASSISTANT


class FunctionCallItem(InputItemBase):
    """A tool call made by a previous turn."""
    type: Literal["function_call"] = "function_call"
    call_id: str
    name: str
    arguments: str = ""
    status: Optional[str] = None


class FunctionCallOutputItem(InputItemBase):
    """The result of running a tool call."""
    type: Literal["function_call_output"] = "function_call_output"
    call_id: str
    name: Optional[str] = None
    output: str = ""


ConversationItem = Union[ConversationMessage, ThinkingItem, FunctionCallItem, FunctionCallOutputItem]

_item_list_adapter = TypeAdapter(
    List[Annotated[ConversationItem, Field(discriminator="type")]]
)


def parse_conversation(
    items: Union[str, Sequence[Union[ConversationItem, Dict[str, Any]]]]
) -> List[ConversationItem]:
    """Normalize a prompt string or a list of items/dicts into typed items.

    Dicts without a ``type`` key are treated as plain messages.
    """
    if isinstance(items, str):
        return [ConversationMessage(role=TurnRole.USER, content=items)]

    raw = []
    for item in items:
        if isinstance(item, BaseModel):
            raw.append(item)
        elif isinstance(item, dict):
            data = dict(item)
            data.setdefault("type", "message")
            raw.append(data)
        else:
            raise ValueError(f"Invalid conversation item: {type(item)} - {item}")
    return _item_list_adapter.validate_python(raw)
