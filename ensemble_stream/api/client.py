"""Main client interface for Ensemble Stream."""

from typing import AsyncGenerator, Dict, Optional

from ..agents.models.agent_definition import AgentDefinition
from ..core.pause import PauseController, get_pause_controller
from ..errors import UnknownModelError
from ..models.events import ErrorEvent, StreamEvent
from ..models.generation import StreamResult
from ..models.streaming import StreamingOptions
from ..observability.cost_ledger import get_cost_ledger
from ..observability.sinks.base import CostLedger
from ..providers import PROVIDER_CLASSES, ProviderAdapter, provider_name_for_model
from ..providers.base import ImagePreprocessor, Messages


class EnsembleClient:
    """High-level client routing stream calls to provider adapters.

    All providers created by one client share its pause controller and
    cost ledger.
    """

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        anthropic_api_key: Optional[str] = None,
        pause_controller: Optional[PauseController] = None,
        cost_ledger: Optional[CostLedger] = None,
        streaming_options: Optional[StreamingOptions] = None,
        image_preprocessor: Optional[ImagePreprocessor] = None,
        providers: Optional[Dict[str, ProviderAdapter]] = None,
    ):
        """
        Initialize the client.

        Args:
            openai_api_key: Optional OpenAI API key (defaults to OPENAI_API_KEY)
            anthropic_api_key: Optional Anthropic API key (defaults to ANTHROPIC_API_KEY)
            pause_controller: Shared pause switch (defaults to the process-wide one)
            cost_ledger: Usage ledger sink (defaults to the process-wide one)
            streaming_options: Buffering options (defaults to ENSEMBLE_* env vars)
            image_preprocessor: Optional image splitter for OpenAI requests
            providers: Pre-built adapters keyed by provider name
        """
        self.pause_controller = pause_controller or get_pause_controller()
        self.cost_ledger = cost_ledger if cost_ledger is not None else get_cost_ledger()
        self.streaming_options = streaming_options or StreamingOptions.from_env()
        self.image_preprocessor = image_preprocessor
        self._api_keys = {"openai": openai_api_key, "anthropic": anthropic_api_key}
        self._providers: Dict[str, ProviderAdapter] = dict(providers or {})

    def get_provider(self, model: str) -> ProviderAdapter:
        """Adapter for ``model``, created on first use.

        Raises:
            UnknownModelError: no provider family matches the model
        """
        name = provider_name_for_model(model)
        if name is None:
            raise UnknownModelError(model)
        if name not in self._providers:
            self._providers[name] = PROVIDER_CLASSES[name](
                api_key=self._api_keys.get(name),
                pause_controller=self.pause_controller,
                cost_ledger=self.cost_ledger,
                options=self.streaming_options,
                image_preprocessor=self.image_preprocessor,
            )
        return self._providers[name]

    async def stream(
        self,
        messages: Messages,
        model: str,
        agent: Optional[AgentDefinition] = None,
    ) -> AsyncGenerator[StreamEvent, None]:
        """Stream canonical events for one response.

        Args:
            messages: Prompt string or ordered conversation items
            model: Model identifier, optionally with an effort/budget suffix
            agent: Tools, sampling settings and cancellation token

        Yields:
            Canonical events; failures arrive as ``error`` events
        """
        try:
            provider = self.get_provider(model)
        except UnknownModelError as e:
            yield ErrorEvent(error=e.message, code=e.code, model=model)
            return

        async for event in provider.create_response_stream(messages, model, agent):
            yield event

    async def collect(
        self,
        messages: Messages,
        model: str,
        agent: Optional[AgentDefinition] = None,
    ) -> StreamResult:
        """Run a stream to completion and aggregate its events."""
        result = StreamResult()
        async for event in self.stream(messages, model, agent):
            result.add(event)
        return result


async def stream_response(
    messages: Messages,
    model: str,
    agent: Optional[AgentDefinition] = None,
) -> AsyncGenerator[StreamEvent, None]:
    """Convenience function streaming with a default client."""
    client = EnsembleClient()
    async for event in client.stream(messages, model, agent):
        yield event
