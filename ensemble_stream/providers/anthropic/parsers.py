"""Parsing of Anthropic Messages API stream events.

Anthropic streams one message as a sequence of indexed content blocks, and
deltas refer to their block by index only. The parser keeps the index map
and the running usage counters for the duration of one stream.
"""

import uuid
from typing import Any, Dict, List, Optional, Tuple

from ...streaming.types import (
    CitationAdded,
    ReasoningDelta,
    ReasoningDone,
    StreamFailed,
    TextDelta,
    TextDone,
    ToolArgumentsDelta,
    ToolArgumentsDone,
    ToolCallAdded,
    Unrecognized,
    UsageReported,
    VendorEvent,
)
from ..parsing import as_dict, attr

USAGE_FIELDS = (
    "input_tokens",
    "output_tokens",
    "cache_creation_input_tokens",
    "cache_read_input_tokens",
)


def format_web_search_results(results: Any) -> str:
    if not isinstance(results, list):
        return ""
    lines = []
    for result in results:
        if attr(result, "type") != "web_search_result":
            continue
        lines.append(f"{len(lines) + 1}. {attr(result, 'title') or 'Untitled'} – {attr(result, 'url')}")
    return "\n".join(lines)


class AnthropicStreamParser:
    """Maps Messages API stream events to vendor events for one stream."""

    def __init__(self, model: str):
        self.model = model
        self.message_id: Optional[str] = None
        self._blocks: Dict[int, Tuple[str, Any]] = {}
        self._signatures: Dict[int, List[str]] = {}
        self._tool_args: Dict[int, List[str]] = {}
        self._thinking_blocks = 0
        self._has_text = False
        self._usage: Dict[str, int] = {name: 0 for name in USAGE_FIELDS}

    def _message(self) -> str:
        if self.message_id is None:
            self.message_id = f"msg_{uuid.uuid4().hex}"
        return self.message_id

    def _record_usage(self, usage: Any) -> None:
        data = as_dict(usage) or {}
        for name in USAGE_FIELDS:
            value = data.get(name)
            if isinstance(value, int):
                # Counters are cumulative within one message
                self._usage[name] = max(self._usage[name], value)

    def parse(self, event: Any) -> List[VendorEvent]:
        kind = attr(event, "type", "")

        if kind == "message_start":
            message = attr(event, "message")
            self.message_id = attr(message, "id") or self.message_id
            self._record_usage(attr(message, "usage"))
            return []

        if kind == "content_block_start":
            return self._block_start(attr(event, "index", 0), attr(event, "content_block"))

        if kind == "content_block_delta":
            return self._block_delta(attr(event, "index", 0), attr(event, "delta"))

        if kind == "content_block_stop":
            return self._block_stop(attr(event, "index", 0))

        if kind == "message_delta":
            self._record_usage(attr(event, "usage"))
            if attr(attr(event, "delta"), "stop_reason") == "refusal":
                return [StreamFailed(reason="Claude refusal error: the model declined to respond",
                                     code="refusal")]
            return []

        if kind == "message_stop":
            events: List[VendorEvent] = []
            if self._has_text or self._thinking_blocks:
                events.append(TextDone(item_id=self._message()))
            if self._usage["input_tokens"] > 0 or self._usage["output_tokens"] > 0:
                events.append(UsageReported(usage=dict(self._usage)))
            return events

        if kind == "error":
            error = attr(event, "error")
            message = attr(error, "message") or str(error)
            return [StreamFailed(reason=f"Claude API error: {message}", code=attr(error, "type"))]

        return [Unrecognized(kind or type(event).__name__)]

    def _block_start(self, index: int, block: Any) -> List[VendorEvent]:
        block_type = attr(block, "type")

        if block_type == "text":
            self._blocks[index] = ("text", None)
            self._has_text = True
            text = attr(block, "text")
            return [TextDelta(item_id=self._message(), delta=text)] if text else []

        if block_type == "thinking":
            ordinal = self._thinking_blocks
            self._thinking_blocks += 1
            self._blocks[index] = ("thinking", ordinal)
            thinking = attr(block, "thinking")
            if thinking:
                return [ReasoningDelta(item_id=self._message(), summary_index=ordinal, delta=thinking)]
            return []

        if block_type == "tool_use":
            tool_id = attr(block, "id") or f"toolu_{uuid.uuid4().hex}"
            self._blocks[index] = ("tool", tool_id)
            self._tool_args[index] = []
            return [ToolCallAdded(item_id=tool_id, call_id=tool_id, name=attr(block, "name") or "")]

        if block_type == "web_search_tool_result":
            formatted = format_web_search_results(attr(block, "content"))
            if formatted:
                self._has_text = True
                return [TextDelta(item_id=self._message(), delta=f"\n\nSearch Results:\n{formatted}\n")]
            return []

        return [Unrecognized(f"content_block_start:{block_type}")]

    def _block_delta(self, index: int, delta: Any) -> List[VendorEvent]:
        delta_type = attr(delta, "type")

        if delta_type == "text_delta":
            self._has_text = True
            return [TextDelta(item_id=self._message(), delta=attr(delta, "text") or "")]

        if delta_type == "thinking_delta":
            block = self._blocks.get(index)
            if block is None or block[0] != "thinking":
                block = self._blocks[index] = ("thinking", self._thinking_blocks)
                self._thinking_blocks += 1
            return [ReasoningDelta(
                item_id=self._message(),
                summary_index=block[1],
                delta=attr(delta, "thinking") or "",
            )]

        if delta_type == "signature_delta":
            self._signatures.setdefault(index, []).append(attr(delta, "signature") or "")
            return []

        if delta_type == "input_json_delta":
            block = self._blocks.get(index)
            partial = attr(delta, "partial_json") or ""
            if block is None or block[0] != "tool":
                return [ToolArgumentsDelta(item_id=f"unknown-block-{index}", delta=partial)]
            self._tool_args[index].append(partial)
            return [ToolArgumentsDelta(item_id=block[1], delta=partial)]

        if delta_type == "citations_delta":
            citation = attr(delta, "citation")
            url = attr(citation, "url")
            if url:
                return [CitationAdded(item_id=self._message(), url=url, title=attr(citation, "title"))]
            return [Unrecognized(f"content_block_delta:{delta_type}")]

        return [Unrecognized(f"content_block_delta:{delta_type}")]

    def _block_stop(self, index: int) -> List[VendorEvent]:
        block_kind, ref = self._blocks.pop(index, (None, None))

        if block_kind == "thinking":
            signature = "".join(self._signatures.pop(index, [])) or None
            return [ReasoningDone(item_id=self._message(), summary_index=ref, signature=signature)]

        if block_kind == "tool":
            arguments = "".join(self._tool_args.pop(index, [])) or "{}"
            return [ToolArgumentsDone(item_id=ref, arguments=arguments)]

        return []
