"""Request building for the OpenAI Responses API."""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from ...agents.models.agent_definition import AgentDefinition, ModelSettings
from ...agents.tools.schema_utils import resolve_enum_values, strict_schema, strict_tool_parameters
from ...agents.tools.tool_definition import ToolFunction
from ...config.constants import (
    ID_PREFIX_FUNCTION_CALL,
    ID_PREFIX_MESSAGE,
    OPENAI_IMAGE_MAX_HEIGHT,
    OPENAI_REASONING_EFFORTS,
    OPENAI_WEB_SEARCH_TOOL_NAMES,
)
from ...models.conversation_types import (
    ConversationItem,
    ConversationMessage,
    FunctionCallItem,
    FunctionCallOutputItem,
    ThinkingItem,
)

logger = logging.getLogger(__name__)

REASONING_ID_PATTERN = re.compile(r"^(rs_[A-Za-z0-9]+)-(\d+)$")


def resolve_reasoning(model: str) -> Tuple[str, Optional[Dict[str, str]]]:
    """Split an effort suffix off ``model``.

    ``o3-mini-low`` -> (``o3-mini``, low effort). Reasoning models without a
    suffix default to high effort; other models get no reasoning block.
    """
    for suffix, effort in OPENAI_REASONING_EFFORTS.items():
        if model.endswith(suffix):
            return model[: -len(suffix)], {"effort": effort, "summary": "auto"}
    if model.startswith("o"):
        return model, {"effort": "high", "summary": "auto"}
    return model, None


def supports_sampling_params(model: str) -> bool:
    return not model.startswith("o3-")


def map_tool_choice(tool_choice: Any) -> Any:
    if tool_choice is None or isinstance(tool_choice, str):
        return tool_choice
    if isinstance(tool_choice, dict):
        function = tool_choice.get("function")
        if isinstance(function, dict) and function.get("name"):
            return {"type": "function", "name": function["name"]}
        if tool_choice.get("name"):
            return {"type": "function", "name": tool_choice["name"]}
    return tool_choice


async def convert_tools(tools: List[ToolFunction]) -> Tuple[List[Dict[str, Any]], bool]:
    """Convert tools to Responses API tools. Returns (tools, uses_web_search)."""
    converted: List[Dict[str, Any]] = []
    web_search = False
    for tool in tools:
        if tool.name in OPENAI_WEB_SEARCH_TOOL_NAMES:
            web_search = True
            converted.append({"type": "web_search_preview", "search_context_size": "high"})
            continue
        parameters = await resolve_enum_values(tool.parameters)
        converted.append({
            "type": "function",
            "name": tool.name,
            "description": tool.description,
            "parameters": strict_tool_parameters(parameters),
            "strict": True,
        })
    return converted, web_search


def build_text_format(settings: ModelSettings) -> Optional[Dict[str, Any]]:
    if not settings.json_schema:
        return None
    json_schema = settings.json_schema
    return {
        "format": {
            "type": "json_schema",
            "name": json_schema.get("name", "response"),
            "schema": strict_schema(json_schema["schema"]),
            "strict": json_schema.get("strict", True),
        }
    }


class InputBuilder:
    """Converts conversation items into Responses API input."""

    def __init__(self, model: str, image_preprocessor: Any = None):
        self.model = model
        self.image_preprocessor = image_preprocessor
        self.input: List[Dict[str, Any]] = []
        self.image_count = 0
        self._reasoning: Dict[str, Dict[int, str]] = {}

    async def build(self, items: List[ConversationItem]) -> List[Dict[str, Any]]:
        for item in items:
            if isinstance(item, ThinkingItem):
                self._add_thinking(item)
            elif isinstance(item, FunctionCallItem):
                self._add_function_call(item)
            elif isinstance(item, FunctionCallOutputItem):
                self.input.append({
                    "type": "function_call_output",
                    "call_id": item.call_id,
                    "output": item.output,
                })
                await self._add_images(item.images, f"function call output of {item.name or item.call_id}")
            elif isinstance(item, ConversationMessage):
                self._add_message(item)
                await self._add_images(item.images, f"{item.role.value} message")

        for entry in self.input:
            if entry.get("type") == "reasoning":
                summaries = self._reasoning.get(entry["id"], {})
                entry["summary"] = [
                    {"type": "summary_text", "text": summaries[index]}
                    for index in sorted(summaries)
                ]
        return self.input

    def _same_model(self, item: ConversationItem) -> bool:
        return item.model == self.model

    def _add_thinking(self, item: ThinkingItem) -> None:
        match = REASONING_ID_PATTERN.match(item.thinking_id or "")
        if self.model.startswith("o") and match and self._same_model(item):
            reasoning_id, index = match.group(1), int(match.group(2))
            if reasoning_id not in self._reasoning:
                self._reasoning[reasoning_id] = {}
                self.input.append({"type": "reasoning", "id": reasoning_id, "summary": []})
            self._reasoning[reasoning_id][index] = item.content
            return
        self.input.append({
            "type": "message",
            "role": "user",
            "content": f"Thinking: {item.content}",
        })

    def _add_function_call(self, item: FunctionCallItem) -> None:
        entry: Dict[str, Any] = {
            "type": "function_call",
            "call_id": item.call_id,
            "name": item.name,
            "arguments": item.arguments,
            "status": item.status or "completed",
        }
        if item.id and item.id.startswith(ID_PREFIX_FUNCTION_CALL) and self._same_model(item):
            entry["id"] = item.id
        self.input.append(entry)

    def _add_message(self, item: ConversationMessage) -> None:
        entry: Dict[str, Any] = {
            "type": "message",
            "role": item.role.value,
            "content": item.content,
        }
        if item.id and item.id.startswith(ID_PREFIX_MESSAGE) and self._same_model(item):
            entry["id"] = item.id
            entry["status"] = item.status or "completed"
        self.input.append(entry)

    async def _add_images(self, images: Dict[str, str], source: str) -> None:
        for image_id, image_data in images.items():
            segments = [image_data]
            label = f"This is [image #{image_id}] from the {source}"
            if self.image_preprocessor is not None:
                try:
                    segments = await self.image_preprocessor.split(image_data, OPENAI_IMAGE_MAX_HEIGHT)
                except Exception as e:
                    logger.error("Error processing image %s, sending it unprocessed: %s", image_id, e)
                    segments = [image_data]
                    label += " (raw image)"
            if len(segments) > 1:
                label += f" (split into {len(segments)} parts)"

            content: List[Dict[str, Any]] = [{"type": "input_text", "text": label}]
            for segment in segments:
                content.append({"type": "input_image", "image_url": segment, "detail": "high"})
            self.input.append({"type": "message", "role": "user", "content": content})
            self.image_count += len(segments)


async def build_responses_payload(
    items: List[ConversationItem],
    model: str,
    agent: AgentDefinition,
    image_preprocessor: Any = None,
) -> Tuple[Dict[str, Any], int]:
    """Build a streaming Responses API payload. Returns (payload, image_count)."""
    model, reasoning = resolve_reasoning(model)
    settings = agent.model_settings

    builder = InputBuilder(model, image_preprocessor)
    payload: Dict[str, Any] = {
        "model": model,
        "stream": True,
        "input": await builder.build(items),
    }

    if supports_sampling_params(model):
        if settings.temperature is not None:
            payload["temperature"] = settings.temperature
        if settings.top_p is not None:
            payload["top_p"] = settings.top_p
    if settings.max_tokens is not None:
        payload["max_output_tokens"] = settings.max_tokens

    if agent.tools:
        tools, web_search = await convert_tools(agent.tools)
        payload["tools"] = tools
        payload["truncation"] = "auto"
        if web_search:
            # Web search preview does not accept a reasoning block
            reasoning = None

    if reasoning is not None:
        payload["reasoning"] = reasoning

    tool_choice = map_tool_choice(settings.tool_choice)
    if tool_choice is not None:
        payload["tool_choice"] = tool_choice

    text_format = build_text_format(settings)
    if text_format is not None:
        payload["text"] = text_format

    return payload, builder.image_count
