"""
Base Provider Adapter Interface

Every provider follows the same flow for a stream call: build the vendor
request, report it to the request loggers, wait for the pause switch, open
the vendor stream, then hand parsed vendor events to the canonical
translator. Subclasses supply the vendor-specific pieces.
"""

import inspect
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncGenerator,
    AsyncIterator,
    Dict,
    List,
    Optional,
    Protocol,
    Sequence,
    Union,
)

from ..agents.models.agent_definition import AgentDefinition
from ..core.pause import PauseController, get_pause_controller
from ..errors import PauseAbortError
from ..models.conversation_types import ConversationItem, parse_conversation
from ..models.events import StreamEvent
from ..models.streaming import StreamingOptions
from ..observability.cost_ledger import CostLedgerAdapter
from ..observability.logging import StreamLogger
from ..observability.request_log import log_llm_error, log_llm_request, log_llm_response
from ..observability.sinks.base import CostLedger
from ..streaming.translator import CanonicalEventTranslator
from ..streaming.types import VendorEvent
from .errors import ErrorMapper


class ImagePreprocessor(Protocol):
    """Resizes and splits one base64 image into segments within ``max_height``."""

    async def split(self, image_data: str, max_height: int) -> List[str]:
        ...


class VendorEventParser(Protocol):
    """Maps one native SDK event to zero or more vendor events."""

    def parse(self, raw: Any) -> List[VendorEvent]:
        ...


@dataclass
class PreparedRequest:
    """A vendor request ready to send."""
    model: str
    payload: Dict[str, Any]
    image_count: int = 0
    options: Dict[str, Any] = field(default_factory=dict)


Messages = Union[str, Sequence[Union[ConversationItem, Dict[str, Any]]]]


class ProviderAdapter(ABC):
    """
    Abstract base class for streaming provider adapters.

    The adapter is responsible for:
    - Translating conversation items and agent settings to a vendor request
    - Opening the vendor stream
    - Supplying a parser from native events to the vendor event variant

    Buffering, tool-call assembly, reasoning, citations, pause handling and
    usage accounting are shared and live in the translator.
    """

    def __init__(
        self,
        pause_controller: Optional[PauseController] = None,
        cost_ledger: Optional[CostLedger] = None,
        options: Optional[StreamingOptions] = None,
        image_preprocessor: Optional[ImagePreprocessor] = None,
    ):
        self.pause_controller = pause_controller or get_pause_controller()
        self.ledger = CostLedgerAdapter(self.get_provider_name(), cost_ledger)
        self.options = options or StreamingOptions.from_env()
        self.image_preprocessor = image_preprocessor
        self.logger = StreamLogger(self.get_provider_name())

    @abstractmethod
    async def build_request(
        self,
        items: List[ConversationItem],
        model: str,
        agent: AgentDefinition,
    ) -> PreparedRequest:
        """Translate conversation items and agent settings into a vendor request."""

    @abstractmethod
    async def open_stream(self, request: PreparedRequest) -> Any:
        """Send the request and return the vendor's async event stream."""

    @abstractmethod
    def create_parser(self, request: PreparedRequest) -> VendorEventParser:
        """Return a fresh parser for one stream."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider is configured (API key present)."""

    def get_provider_name(self) -> str:
        class_name = self.__class__.__name__
        if class_name.endswith("Provider"):
            return class_name[:-8].lower()
        return class_name.lower()

    async def create_response_stream(
        self,
        messages: Messages,
        model: str,
        agent: Optional[AgentDefinition] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Stream one response as canonical events.

        Setup failures (bad input, authentication, transport) yield a single
        ``error`` event. Cancelling ``agent.cancel_event`` ends the stream
        after buffered content has been flushed.
        """
        agent = agent or AgentDefinition()
        provider = self.get_provider_name()
        request_id = str(uuid.uuid4())
        request: Optional[PreparedRequest] = None

        try:
            items = parse_conversation(messages)
            request = await self.build_request(items, model, agent)
            log_llm_request(agent.agent_id, provider, request.model, request.payload,
                            request_id=request_id)
            await self.pause_controller.wait_while_paused(agent.cancel_event)
            with self.logger.track_request("stream", request.model, request_id=request_id[:8]):
                raw_stream = await self.open_stream(request)
        except PauseAbortError as e:
            self.logger.info(f"Stream not started: {e}", model=model, request_id=request_id[:8])
            log_llm_response(request_id, {"cancelled": True})
            return
        except Exception as e:
            if request is None:
                self.logger.error("Failed to build request", model=model,
                                  request_id=request_id[:8], error=e)
            error_event = ErrorMapper.to_error_event(e, provider)
            error_event.provider = provider
            error_event.model = request.model if request else model
            error_event.request_id = request_id
            log_llm_error(request_id, {"error": error_event.error, "code": error_event.code})
            yield error_event
            return

        translator = CanonicalEventTranslator(
            provider,
            request.model,
            ledger=self.ledger,
            pause_controller=self.pause_controller,
            options=self.options,
            request_id=request_id,
            image_count=request.image_count,
        )
        captured: Optional[List[Any]] = [] if self.options.capture_raw_events else None
        vendor_events = self._vendor_events(raw_stream, self.create_parser(request), captured)

        async for event in translator.translate(vendor_events, agent.cancel_event):
            yield event

        summary = translator.summary()
        if captured is not None:
            summary["raw_events"] = captured
        if translator.failure:
            log_llm_error(request_id, summary)
        else:
            log_llm_response(request_id, summary)

    async def _vendor_events(
        self,
        raw_stream: Any,
        parser: VendorEventParser,
        captured: Optional[List[Any]],
    ) -> AsyncIterator[VendorEvent]:
        try:
            async for raw in raw_stream:
                if captured is not None:
                    captured.append(_dump(raw))
                for event in parser.parse(raw):
                    yield event
        finally:
            await _close_stream(raw_stream)


def _dump(raw: Any) -> Any:
    if hasattr(raw, "model_dump"):
        return raw.model_dump()
    if isinstance(raw, dict):
        return dict(raw)
    return repr(raw)


async def _close_stream(raw_stream: Any) -> None:
    close = getattr(raw_stream, "aclose", None) or getattr(raw_stream, "close", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result
