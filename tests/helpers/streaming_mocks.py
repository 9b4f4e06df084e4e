"""Helper functions for creating streaming mocks."""

import asyncio
from types import SimpleNamespace
from typing import Any, AsyncGenerator, Dict, Iterable, List, Optional


async def async_stream(events: Iterable[Any], delay: float = 0.0) -> AsyncGenerator[Any, None]:
    """Yield ``events`` one by one, optionally sleeping between them."""
    for event in events:
        if delay:
            await asyncio.sleep(delay)
        yield event


async def hanging_stream(events: Iterable[Any]) -> AsyncGenerator[Any, None]:
    """Yield ``events`` and then block forever, like a stalled connection."""
    for event in events:
        yield event
    await asyncio.Event().wait()


# OpenAI Responses API events

def openai_event(event_type: str, **fields) -> SimpleNamespace:
    return SimpleNamespace(type=event_type, **fields)


def openai_text_events(item_id: str, deltas: List[str], final_text: Optional[str] = None) -> List[SimpleNamespace]:
    events = [openai_event("response.output_item.added",
                           item=SimpleNamespace(type="message", id=item_id))]
    events += [openai_event("response.output_text.delta", item_id=item_id, delta=d) for d in deltas]
    events.append(openai_event(
        "response.output_text.done",
        item_id=item_id,
        text="".join(deltas) if final_text is None else final_text,
    ))
    return events


def openai_function_call_events(item_id: str, call_id: str, name: str,
                                fragments: List[str], done: bool = True) -> List[SimpleNamespace]:
    events = [openai_event(
        "response.output_item.added",
        item=SimpleNamespace(type="function_call", id=item_id, call_id=call_id, name=name, arguments=""),
    )]
    events += [openai_event("response.function_call_arguments.delta", item_id=item_id, delta=f)
               for f in fragments]
    if done:
        events.append(openai_event("response.function_call_arguments.done",
                                   item_id=item_id, arguments="".join(fragments)))
    return events


def openai_completed_event(input_tokens: int = 10, output_tokens: int = 5,
                           cached_tokens: int = 0, reasoning_tokens: int = 0) -> SimpleNamespace:
    usage: Dict[str, Any] = {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
        "input_tokens_details": {"cached_tokens": cached_tokens},
        "output_tokens_details": {"reasoning_tokens": reasoning_tokens},
    }
    return openai_event("response.completed", response=SimpleNamespace(usage=usage))


def openai_text_stream(chunks: List[str], item_id: str = "msg_1") -> List[SimpleNamespace]:
    """A complete Responses API stream for a plain text answer."""
    return (
        [openai_event("response.created"), openai_event("response.in_progress")]
        + openai_text_events(item_id, chunks)
        + [openai_completed_event(output_tokens=len(chunks) * 2)]
    )


# Anthropic Messages API events

def anthropic_event(event_type: str, **fields) -> SimpleNamespace:
    return SimpleNamespace(type=event_type, **fields)


def anthropic_message_start(message_id: str = "msg_claude", input_tokens: int = 10) -> SimpleNamespace:
    return anthropic_event(
        "message_start",
        message=SimpleNamespace(
            id=message_id,
            usage={"input_tokens": input_tokens, "output_tokens": 1,
                   "cache_creation_input_tokens": 0, "cache_read_input_tokens": 0},
        ),
    )


def anthropic_text_block(index: int, chunks: List[str]) -> List[SimpleNamespace]:
    events = [anthropic_event("content_block_start", index=index,
                              content_block=SimpleNamespace(type="text", text=""))]
    events += [anthropic_event("content_block_delta", index=index,
                               delta=SimpleNamespace(type="text_delta", text=c)) for c in chunks]
    events.append(anthropic_event("content_block_stop", index=index))
    return events


def anthropic_thinking_block(index: int, chunks: List[str], signature: str = "sig") -> List[SimpleNamespace]:
    events = [anthropic_event("content_block_start", index=index,
                              content_block=SimpleNamespace(type="thinking", thinking=""))]
    events += [anthropic_event("content_block_delta", index=index,
                               delta=SimpleNamespace(type="thinking_delta", thinking=c)) for c in chunks]
    events.append(anthropic_event("content_block_delta", index=index,
                                  delta=SimpleNamespace(type="signature_delta", signature=signature)))
    events.append(anthropic_event("content_block_stop", index=index))
    return events


def anthropic_tool_block(index: int, tool_id: str, name: str, fragments: List[str]) -> List[SimpleNamespace]:
    events = [anthropic_event("content_block_start", index=index,
                              content_block=SimpleNamespace(type="tool_use", id=tool_id, name=name, input={}))]
    events += [anthropic_event("content_block_delta", index=index,
                               delta=SimpleNamespace(type="input_json_delta", partial_json=f))
               for f in fragments]
    events.append(anthropic_event("content_block_stop", index=index))
    return events


def anthropic_message_end(output_tokens: int = 20, stop_reason: str = "end_turn") -> List[SimpleNamespace]:
    return [
        anthropic_event("message_delta",
                        delta=SimpleNamespace(stop_reason=stop_reason),
                        usage={"output_tokens": output_tokens}),
        anthropic_event("message_stop"),
    ]


def anthropic_text_stream(chunks: List[str], message_id: str = "msg_claude") -> List[SimpleNamespace]:
    """A complete Messages API stream for a plain text answer."""
    return (
        [anthropic_message_start(message_id)]
        + anthropic_text_block(0, chunks)
        + anthropic_message_end(output_tokens=len(chunks) * 2)
    )
