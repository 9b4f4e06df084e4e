"""
Canonical event translator.

Consumes the vendor event variant produced by a provider parser and yields
the canonical vocabulary. Owns all per-stream state: delta buffers, order
counters, the tool-call assembler, the reasoning channel and the citation
tracker. No exception escapes ``translate``; failures become one ``error``
event and the teardown path still flushes whatever was buffered.
"""

import asyncio
from typing import Any, AsyncGenerator, AsyncIterator, Dict, List, Optional

from ..core.pause import PauseController, get_pause_controller
from ..errors import PauseAbortError
from ..models.events import (
    ErrorEvent,
    MessageCompleteEvent,
    MessageDeltaEvent,
    StreamEvent,
    ToolStartEvent,
)
from ..models.streaming import StreamingOptions
from ..models.usage import UsageRecord
from ..observability.cost_ledger import CostLedgerAdapter
from ..observability.logging import StreamLogger
from .citations import CitationTracker
from .delta_buffer import DeltaBuffer, buffer_delta, flush_buffered_deltas
from .reasoning import ReasoningChannel
from .tool_calls import ToolCallAssembler
from .types import (
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

_END = object()
_CANCELLED = object()


class CanonicalEventTranslator:
    """Translates one vendor stream into canonical events."""

    def __init__(
        self,
        provider: str,
        model: str,
        ledger: Optional[CostLedgerAdapter] = None,
        pause_controller: Optional[PauseController] = None,
        options: Optional[StreamingOptions] = None,
        request_id: Optional[str] = None,
        image_count: int = 0,
    ):
        self.provider = provider
        self.model = model
        self.ledger = ledger if ledger is not None else CostLedgerAdapter(provider)
        self.pause = pause_controller if pause_controller is not None else get_pause_controller()
        self.options = options or StreamingOptions()
        self.request_id = request_id
        self.image_count = image_count
        self._log = StreamLogger(provider)

        self._buffers: Dict[str, DeltaBuffer] = {}
        self._positions: Dict[str, int] = {}
        self._content: Dict[str, List[str]] = {}
        self._tools = ToolCallAssembler()
        self._reasoning = ReasoningChannel()
        self._citations = CitationTracker()

        self.usage_records: List[UsageRecord] = []
        self.failure: Optional[str] = None
        self.cancelled = False
        self.vendor_event_count = 0
        self.emitted_count = 0

    async def translate(
        self,
        events: AsyncIterator[VendorEvent],
        cancel_event: Optional[asyncio.Event] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        """Yield canonical events for ``events`` until it ends, fails or is cancelled."""
        iterator = events.__aiter__()
        finished = False
        try:
            try:
                while True:
                    await self.pause.wait_while_paused(cancel_event)
                    event = await self._next(iterator, cancel_event)
                    if event is _END:
                        break
                    if event is _CANCELLED:
                        raise PauseAbortError("Stream cancelled")
                    self.vendor_event_count += 1
                    for out in self._dispatch(event):
                        yield self._stamp(out)
                    if self.failure is not None:
                        break
            except PauseAbortError as e:
                self.cancelled = True
                self._log.info(f"Stream stopped: {e}", model=self.model, request_id=self.request_id)
            except Exception as e:
                self._log.error("Stream processing failed", model=self.model,
                                request_id=self.request_id, error=e)
                self.failure = f"Stream processing error: {e}"
                yield self._stamp(ErrorEvent(error=self.failure, code="processing_error"))

            for out in self._teardown():
                yield self._stamp(out)
            finished = True
        finally:
            if not finished:
                self._log.warning(
                    "Stream closed by consumer, discarding buffered state",
                    model=self.model,
                    request_id=self.request_id,
                    pending_tools=len(self._tools) or None,
                )
                self._discard()
            await _aclose(iterator)

    def summary(self) -> Dict[str, Any]:
        """Outcome of the stream for the request logger."""
        return {
            "provider": self.provider,
            "model": self.model,
            "vendor_events": self.vendor_event_count,
            "emitted_events": self.emitted_count,
            "usage": [record.model_dump() for record in self.usage_records],
            "citations": [c.url for c in self._citations.citations],
            "failure": self.failure,
            "cancelled": self.cancelled,
        }

    async def _next(self, iterator: AsyncIterator[VendorEvent],
                    cancel_event: Optional[asyncio.Event]) -> Any:
        if cancel_event is None:
            try:
                return await iterator.__anext__()
            except StopAsyncIteration:
                return _END

        if cancel_event.is_set():
            return _CANCELLED

        next_task = asyncio.ensure_future(iterator.__anext__())
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({next_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not next_task.done():
                next_task.cancel()
                await asyncio.wait({next_task})

        if next_task.cancelled():
            return _CANCELLED
        try:
            return next_task.result()
        except StopAsyncIteration:
            return _END

    def _dispatch(self, event: VendorEvent) -> List[StreamEvent]:
        if isinstance(event, TextDelta):
            return self._on_text_delta(event.item_id, event.delta)

        elif isinstance(event, CitationAdded):
            events = self._flush_item(event.item_id)
            marker = self._citations.marker(event.url, event.title)
            self._content.setdefault(event.item_id, []).append(marker)
            events.append(self._message_delta(event.item_id, marker))
            return events

        elif isinstance(event, TextDone):
            events = self._flush_item(event.item_id)
            content = "".join(self._content.pop(event.item_id, []))
            if not content:
                content = event.text or ""
            events.append(MessageCompleteEvent(
                content=content + self._citations.footnotes(),
                message_id=event.item_id,
                thinking_content=self._reasoning.thinking_for(event.item_id),
            ))
            return events

        elif isinstance(event, ToolCallAdded):
            self._tools.add(event.item_id, event.call_id, event.name)
            return []

        elif isinstance(event, ToolArgumentsDelta):
            self._tools.append_arguments(event.item_id, event.delta)
            return []

        elif isinstance(event, ToolArgumentsDone):
            call = self._tools.finish(event.item_id, event.arguments)
            return [ToolStartEvent(tool_call=call)] if call else []

        elif isinstance(event, ReasoningDelta):
            thinking = self._reasoning.delta(event.item_id, event.summary_index, event.delta)
            return [thinking] if thinking else []

        elif isinstance(event, ReasoningDone):
            return [self._reasoning.done(event.item_id, event.summary_index,
                                         event.text, event.signature)]

        elif isinstance(event, ReasoningItemDone):
            if event.summary_count == 0:
                return [self._reasoning.empty_item(event.item_id)]
            return []

        elif isinstance(event, UsageReported):
            record = self.ledger.record_usage(
                event.usage, self.model,
                image_count=self.image_count,
                request_id=self.request_id,
            )
            if record is not None:
                self.usage_records.append(record)
            return []

        elif isinstance(event, StreamFailed):
            self.failure = event.reason
            self._log.warning(event.reason, model=self.model, request_id=self.request_id)
            return [ErrorEvent(error=event.reason, code=event.code)]

        elif isinstance(event, Unrecognized):
            self._log.debug(f"Ignoring vendor event {event.kind}", model=self.model,
                            request_id=self.request_id)
            return []

        else:
            self._log.debug(f"Unhandled vendor event {type(event).__name__}",
                            model=self.model, request_id=self.request_id)
            return []

    def _on_text_delta(self, item_id: str, delta: str) -> List[StreamEvent]:
        if not delta:
            return []
        self._content.setdefault(item_id, []).append(delta)
        if not self.options.enable_delta_buffering:
            return [self._message_delta(item_id, delta)]
        return buffer_delta(
            self._buffers,
            item_id,
            delta,
            lambda content: self._message_delta(item_id, content),
            factory=self._new_buffer,
        )

    def _new_buffer(self) -> DeltaBuffer:
        return DeltaBuffer(
            threshold=self.options.delta_initial_threshold,
            max_threshold=self.options.delta_max_threshold,
            step=self.options.delta_threshold_step,
            time_limit_ms=self.options.delta_flush_interval_ms,
        )

    def _message_delta(self, item_id: str, content: str) -> MessageDeltaEvent:
        order = self._positions.get(item_id, 0)
        self._positions[item_id] = order + 1
        return MessageDeltaEvent(content=content, message_id=item_id, order=order)

    def _flush_item(self, item_id: str) -> List[StreamEvent]:
        buffer = self._buffers.pop(item_id, None)
        if buffer is None:
            return []
        content = buffer.flush()
        return [self._message_delta(item_id, content)] if content else []

    def _teardown(self) -> List[StreamEvent]:
        events: List[StreamEvent] = flush_buffered_deltas(self._buffers, self._message_delta)
        events.extend(self._reasoning.drain())
        events.extend(ToolStartEvent(tool_call=call) for call in self._tools.drain())
        return events

    def _discard(self) -> None:
        self._buffers.clear()
        self._content.clear()
        self._tools = ToolCallAssembler()
        self._reasoning = ReasoningChannel()

    def _stamp(self, event: StreamEvent) -> StreamEvent:
        event.provider = self.provider
        event.model = self.model
        event.request_id = self.request_id
        self.emitted_count += 1
        return event


async def _aclose(iterator: Any) -> None:
    aclose = getattr(iterator, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception as e:
        StreamLogger("stream").debug(f"Upstream close failed: {e}")
