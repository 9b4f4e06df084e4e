import os
from typing import Any, List, Optional

from anthropic import AsyncAnthropic
from dotenv import load_dotenv

from ...agents.models.agent_definition import AgentDefinition
from ...config.constants import ANTHROPIC_DEFAULT_TIMEOUT
from ...errors import ProviderError
from ...models.conversation_types import ConversationItem
from ..base import PreparedRequest, ProviderAdapter
from .parsers import AnthropicStreamParser
from .payloads import build_messages_payload

# Load environment variables
load_dotenv()


class AnthropicProvider(ProviderAdapter):
    """Anthropic provider streaming through the Messages API."""

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._client: Optional[AsyncAnthropic] = None
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        try:
            self._timeout = float(os.getenv("ANTHROPIC_TIMEOUT", str(ANTHROPIC_DEFAULT_TIMEOUT)))
        except ValueError:
            self._timeout = ANTHROPIC_DEFAULT_TIMEOUT

    @property
    def client(self) -> AsyncAnthropic:
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderError("Anthropic API key not found in environment variables",
                                    provider="anthropic", status_code=401)
            self._client = AsyncAnthropic(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def build_request(
        self,
        items: List[ConversationItem],
        model: str,
        agent: AgentDefinition,
    ) -> PreparedRequest:
        payload, headers, image_count = await build_messages_payload(items, model, agent)
        options = {"extra_headers": headers} if headers else {}
        return PreparedRequest(
            model=payload["model"],
            payload=payload,
            image_count=image_count,
            options=options,
        )

    async def open_stream(self, request: PreparedRequest) -> Any:
        return await self.client.messages.create(**request.payload, **request.options)

    def create_parser(self, request: PreparedRequest) -> AnthropicStreamParser:
        return AnthropicStreamParser(request.model)
