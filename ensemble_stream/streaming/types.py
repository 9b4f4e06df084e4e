"""
Vendor event variant.

Provider parsers turn native SDK stream events into these records, and the
translator consumes nothing else. Vendor shapes the parsers do not know map
to ``Unrecognized`` so new event kinds pass through harmlessly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class TextDelta:
    item_id: str
    delta: str


@dataclass(frozen=True)
class TextDone:
    item_id: str
    text: Optional[str] = None  # None when the vendor does not resend the final text


@dataclass(frozen=True)
class CitationAdded:
    item_id: str
    url: str
    title: Optional[str] = None


@dataclass(frozen=True)
class ToolCallAdded:
    item_id: str
    call_id: str
    name: str


@dataclass(frozen=True)
class ToolArgumentsDelta:
    item_id: str
    delta: str


@dataclass(frozen=True)
class ToolArgumentsDone:
    item_id: str
    arguments: str


@dataclass(frozen=True)
class ReasoningDelta:
    item_id: str
    summary_index: int
    delta: str


@dataclass(frozen=True)
class ReasoningDone:
    item_id: str
    summary_index: int
    text: Optional[str] = None
    signature: Optional[str] = None


@dataclass(frozen=True)
class ReasoningItemDone:
    """A reasoning item finished; ``summary_count`` is how many summaries it carried."""
    item_id: str
    summary_count: int


@dataclass(frozen=True)
class UsageReported:
    usage: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StreamFailed:
    """Terminal vendor failure: failed, incomplete, refused or an error event."""
    reason: str
    code: Optional[str] = None


@dataclass(frozen=True)
class Unrecognized:
    kind: str


VendorEvent = Union[
    TextDelta,
    TextDone,
    CitationAdded,
    ToolCallAdded,
    ToolArgumentsDelta,
    ToolArgumentsDone,
    ReasoningDelta,
    ReasoningDone,
    ReasoningItemDone,
    UsageReported,
    StreamFailed,
    Unrecognized,
]
