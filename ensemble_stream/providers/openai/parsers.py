"""Parsing of OpenAI Responses API stream events."""

from typing import Any, List

from ...streaming.types import (
    CitationAdded,
    ReasoningDelta,
    ReasoningDone,
    ReasoningItemDone,
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


class OpenAIResponsesParser:
    """Maps Responses API events to vendor events. Stateless apart from the model name."""

    def __init__(self, model: str):
        self.model = model

    def parse(self, event: Any) -> List[VendorEvent]:
        kind = attr(event, "type", "")

        if kind == "response.completed":
            usage = as_dict(attr(attr(event, "response"), "usage"))
            return [UsageReported(usage=usage)] if usage else []

        if kind == "response.failed":
            error = attr(attr(event, "response"), "error")
            code = attr(error, "code") or "N/A"
            message = attr(error, "message") or "unknown error"
            return [StreamFailed(reason=f"OpenAI response failed: [{code}] {message}", code=code)]

        if kind == "response.incomplete":
            details = attr(attr(event, "response"), "incomplete_details")
            reason = attr(details, "reason") or "unknown reason"
            return [StreamFailed(reason=f"OpenAI response incomplete: {reason}", code="incomplete")]

        if kind == "response.output_item.added":
            item = attr(event, "item")
            if attr(item, "type") == "function_call":
                item_id = attr(item, "id") or attr(item, "call_id")
                return [ToolCallAdded(
                    item_id=item_id,
                    call_id=attr(item, "call_id") or item_id,
                    name=attr(item, "name") or "",
                )]
            return [Unrecognized(kind)]

        if kind == "response.output_item.done":
            item = attr(event, "item")
            if attr(item, "type") == "reasoning":
                summary = attr(item, "summary") or []
                return [ReasoningItemDone(item_id=attr(item, "id"), summary_count=len(summary))]
            return [Unrecognized(kind)]

        if kind == "response.output_text.delta":
            return [TextDelta(item_id=attr(event, "item_id"), delta=attr(event, "delta") or "")]

        if kind == "response.output_text.annotation.added":
            annotation = attr(event, "annotation")
            url = attr(annotation, "url")
            if attr(annotation, "type") == "url_citation" and url:
                return [CitationAdded(
                    item_id=attr(event, "item_id"),
                    url=url,
                    title=attr(annotation, "title"),
                )]
            return [Unrecognized(kind)]

        if kind == "response.output_text.done":
            return [TextDone(item_id=attr(event, "item_id"), text=attr(event, "text"))]

        if kind == "response.refusal.done":
            refusal = attr(event, "refusal") or "Refusal without reason"
            return [StreamFailed(reason=f"OpenAI refusal error: {refusal}", code="refusal")]

        if kind == "response.function_call_arguments.delta":
            return [ToolArgumentsDelta(item_id=attr(event, "item_id"), delta=attr(event, "delta") or "")]

        if kind == "response.function_call_arguments.done":
            return [ToolArgumentsDone(item_id=attr(event, "item_id"),
                                      arguments=attr(event, "arguments") or "")]

        if kind == "response.reasoning_summary_text.delta":
            return [ReasoningDelta(
                item_id=attr(event, "item_id"),
                summary_index=attr(event, "summary_index", 0) or 0,
                delta=attr(event, "delta") or "",
            )]

        if kind == "response.reasoning_summary_text.done":
            return [ReasoningDone(
                item_id=attr(event, "item_id"),
                summary_index=attr(event, "summary_index", 0) or 0,
                text=attr(event, "text"),
            )]

        if kind == "error":
            code = attr(event, "code") or "N/A"
            message = attr(event, "message") or "unknown error"
            return [StreamFailed(
                reason=f"OpenAI API error ({self.model}): [{code}] {message}",
                code=code,
            )]

        # response.created, in_progress, content_part.*, refusal.delta,
        # file_search_call.*, web_search_call.*, reasoning_summary_part.*
        return [Unrecognized(kind or type(event).__name__)]
