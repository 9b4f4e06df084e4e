"""Request building for the Anthropic Messages API."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from ...agents.models.agent_definition import AgentDefinition
from ...agents.tools.schema_utils import resolve_enum_values
from ...agents.tools.tool_definition import ToolFunction
from ...config.constants import (
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_DEFAULT_THINKING_BUDGET,
    ANTHROPIC_INTERLEAVED_THINKING_BETA,
    ANTHROPIC_INTERLEAVED_THINKING_MODELS,
    ANTHROPIC_THINKING_BUDGETS,
    ANTHROPIC_THINKING_MODELS,
    ANTHROPIC_WEB_SEARCH_TOOL,
    ANTHROPIC_WEB_SEARCH_TOOL_NAME,
    DEFAULT_EMPTY_CONVERSATION_PROMPT,
)
from ...models.conversation_types import (
    ConversationItem,
    ConversationMessage,
    FunctionCallItem,
    FunctionCallOutputItem,
    ThinkingItem,
    TurnRole,
)

logger = logging.getLogger(__name__)

# Headroom for visible output when thinking is enabled
THINKING_OUTPUT_HEADROOM = 1024


def resolve_thinking(model: str) -> Tuple[str, Optional[int]]:
    """Split a thinking-budget suffix off ``model``.

    Returns (model, budget). A budget of None means thinking stays off.
    """
    for suffix, budget in ANTHROPIC_THINKING_BUDGETS.items():
        if model.endswith(suffix):
            return model[: -len(suffix)], (budget or None)
    if model.startswith(ANTHROPIC_THINKING_MODELS):
        return model, ANTHROPIC_DEFAULT_THINKING_BUDGET
    return model, None


def parse_tool_arguments(arguments: str, name: str = "") -> Dict[str, Any]:
    """Decode replayed tool-call arguments into a ``tool_use`` input object."""
    text = arguments or "{}"
    if "}{" in text:
        logger.warning("Malformed concatenated JSON arguments for %s: %s", name, text)
        start, end = text.find("{"), text.find("}") + 1
        text = text[start:end] if start != -1 and end > start else "{}"
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Unparseable arguments for %s, sending empty input: %s", name, arguments)
        return {}
    return value if isinstance(value, dict) else {}


def image_block(image_data: str) -> Dict[str, Any]:
    """Build a base64 image content block from raw base64 or a data URL."""
    media_type = "image/png"
    data = image_data
    if image_data.startswith("data:") and ";base64," in image_data:
        header, data = image_data.split(";base64,", 1)
        media_type = header[len("data:"):] or media_type
    return {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": data}}


def _content_blocks(content: Any) -> List[Dict[str, Any]]:
    if isinstance(content, str):
        return [{"type": "text", "text": content}]
    return list(content)


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = [part.get("text", "") for part in content if isinstance(part, dict)]
    return "\n".join(p for p in parts if p)


class MessageBuilder:
    """Converts conversation items into Anthropic system text and turns."""

    def __init__(self):
        self.system: List[str] = []
        self.messages: List[Dict[str, Any]] = []
        self.image_count = 0
        self._tool_use_ids: set = set()

    def build(self, items: List[ConversationItem]) -> Tuple[List[str], List[Dict[str, Any]]]:
        for item in items:
            if isinstance(item, FunctionCallItem):
                self._add_function_call(item)
            elif isinstance(item, FunctionCallOutputItem):
                blocks = [{"type": "tool_result", "tool_use_id": item.call_id, "content": item.output}]
                self._append("user", blocks + self._images(item.images))
            elif isinstance(item, ThinkingItem):
                self._add_thinking(item)
            elif isinstance(item, ConversationMessage):
                self._add_message(item)
        return self.system, self.messages

    def _add_function_call(self, item: FunctionCallItem) -> None:
        if item.call_id in self._tool_use_ids:
            logger.warning("Skipping duplicate tool_use id %s", item.call_id)
            return
        self._tool_use_ids.add(item.call_id)
        self._append("assistant", [{
            "type": "tool_use",
            "id": item.call_id,
            "name": item.name,
            "input": parse_tool_arguments(item.arguments, item.name),
        }])

    def _add_thinking(self, item: ThinkingItem) -> None:
        content = item.content.strip()
        if not content:
            return
        if item.signature:
            self._append("assistant", [{"type": "thinking", "thinking": content, "signature": item.signature}])
        else:
            self._append("assistant", [{"type": "text", "text": f"Thinking: {content}"}])

    def _add_message(self, item: ConversationMessage) -> None:
        role = item.role
        if role == TurnRole.DEVELOPER:
            role = TurnRole.SYSTEM if not self.messages else TurnRole.USER
        if role == TurnRole.SYSTEM:
            text = _message_text(item.content)
            if text:
                self.system.append(text)
            return

        blocks = [b for b in _content_blocks(item.content) if b.get("type") != "text" or b.get("text")]
        blocks += self._images(item.images)
        if blocks:
            self._append(role.value, blocks)

    def _images(self, images: Dict[str, str]) -> List[Dict[str, Any]]:
        self.image_count += len(images)
        return [image_block(data) for data in images.values()]

    def _append(self, role: str, blocks: List[Dict[str, Any]]) -> None:
        # Consecutive turns with the same role are merged into one
        if self.messages and self.messages[-1]["role"] == role:
            self.messages[-1]["content"].extend(blocks)
        else:
            self.messages.append({"role": role, "content": list(blocks)})


async def convert_tools(tools: List[ToolFunction]) -> List[Dict[str, Any]]:
    converted = []
    for tool in tools:
        if tool.name == ANTHROPIC_WEB_SEARCH_TOOL_NAME:
            converted.append(dict(ANTHROPIC_WEB_SEARCH_TOOL))
            continue
        converted.append({
            "name": tool.name,
            "description": tool.description,
            "input_schema": await resolve_enum_values(tool.parameters),
        })
    return converted


def map_tool_choice(tool_choice: Any) -> Optional[Dict[str, Any]]:
    if tool_choice is None or tool_choice == "none":
        return None
    if tool_choice == "auto":
        return {"type": "auto"}
    if tool_choice == "required":
        return {"type": "any"}
    if isinstance(tool_choice, dict):
        function = tool_choice.get("function")
        name = function.get("name") if isinstance(function, dict) else tool_choice.get("name")
        if name:
            return {"type": "tool", "name": name}
    return None


async def build_messages_payload(
    items: List[ConversationItem],
    model: str,
    agent: AgentDefinition,
) -> Tuple[Dict[str, Any], Dict[str, str], int]:
    """Build a streaming Messages API payload. Returns (payload, headers, image_count)."""
    model, thinking_budget = resolve_thinking(model)
    settings = agent.model_settings

    builder = MessageBuilder()
    system, messages = builder.build(items)
    image_count = builder.image_count
    if not messages:
        logger.warning("No conversation turns for %s, sending default prompt", model)
        messages = [{"role": "user", "content": [{"type": "text", "text": DEFAULT_EMPTY_CONVERSATION_PROMPT}]}]

    if settings.json_schema:
        schema = json.dumps(settings.json_schema["schema"], indent=2)
        system.append(
            "Respond only with a JSON object that matches this JSON schema, "
            f"with no surrounding text:\n{schema}"
        )

    max_tokens = settings.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS
    payload: Dict[str, Any] = {
        "model": model,
        "stream": True,
        "max_tokens": max_tokens,
        "messages": messages,
    }
    if system:
        payload["system"] = "\n\n".join(system)

    if thinking_budget:
        payload["thinking"] = {"type": "enabled", "budget_tokens": thinking_budget}
        if max_tokens <= thinking_budget:
            payload["max_tokens"] = thinking_budget + THINKING_OUTPUT_HEADROOM
    else:
        # Sampling parameters are rejected while thinking is enabled
        if settings.temperature is not None:
            payload["temperature"] = settings.temperature
        if settings.top_p is not None:
            payload["top_p"] = settings.top_p

    if agent.tools:
        payload["tools"] = await convert_tools(agent.tools)
        tool_choice = map_tool_choice(settings.tool_choice)
        if tool_choice is not None:
            payload["tool_choice"] = tool_choice

    headers: Dict[str, str] = {}
    if model.startswith(ANTHROPIC_INTERLEAVED_THINKING_MODELS):
        headers["anthropic-beta"] = ANTHROPIC_INTERLEAVED_THINKING_BETA

    return payload, headers, image_count
