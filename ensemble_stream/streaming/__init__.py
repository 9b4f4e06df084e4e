"""Streaming engine: vendor event variant, buffering and canonical translation."""

from .citations import CitationTracker
from .delta_buffer import DeltaBuffer, buffer_delta, flush_buffered_deltas
from .reasoning import ReasoningChannel, composite_id
from .tool_calls import ToolCallAssembler
from .translator import CanonicalEventTranslator

__all__ = [
    "CanonicalEventTranslator",
    "CitationTracker",
    "DeltaBuffer",
    "ReasoningChannel",
    "ToolCallAssembler",
    "buffer_delta",
    "composite_id",
    "flush_buffered_deltas",
]
