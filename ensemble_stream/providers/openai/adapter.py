import os
from typing import Any, Dict, List, Optional, Sequence, Union

from dotenv import load_dotenv
from openai import AsyncOpenAI

from ...agents.models.agent_definition import AgentDefinition
from ...config.constants import OPENAI_DEFAULT_TIMEOUT
from ...errors import ProviderError
from ...models.conversation_types import ConversationItem
from ...models.usage import UsageRecord
from ..base import PreparedRequest, ProviderAdapter
from ..errors import ErrorMapper
from ..parsing import as_dict
from .parsers import OpenAIResponsesParser
from .payloads import build_responses_payload

# Load environment variables
load_dotenv()


class OpenAIProvider(ProviderAdapter):
    """OpenAI provider streaming through the Responses API."""

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._client: Optional[AsyncOpenAI] = None
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        # Allow overriding default timeout via env variable (seconds)
        try:
            self._timeout = float(os.getenv("OPENAI_TIMEOUT", str(OPENAI_DEFAULT_TIMEOUT)))
        except ValueError:
            self._timeout = OPENAI_DEFAULT_TIMEOUT

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ProviderError("OpenAI API key not found in environment variables",
                                    provider="openai", status_code=401)
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def is_available(self) -> bool:
        return bool(self._api_key)

    async def build_request(
        self,
        items: List[ConversationItem],
        model: str,
        agent: AgentDefinition,
    ) -> PreparedRequest:
        payload, image_count = await build_responses_payload(
            items, model, agent, image_preprocessor=self.image_preprocessor
        )
        return PreparedRequest(model=payload["model"], payload=payload, image_count=image_count)

    async def open_stream(self, request: PreparedRequest) -> Any:
        return await self.client.responses.create(**request.payload)

    def create_parser(self, request: PreparedRequest) -> OpenAIResponsesParser:
        return OpenAIResponsesParser(request.model)

    async def create_embedding(
        self,
        input: Union[str, Sequence[str]],
        model: str = "text-embedding-3-small",
        dimensions: Optional[int] = None,
    ) -> List[List[float]]:
        """Embed one or more texts and record their usage in the cost ledger.

        When the response carries no usage field, a character-based
        estimate is recorded instead.
        """
        texts = [input] if isinstance(input, str) else list(input)
        params: Dict[str, Any] = {"model": model, "input": texts}
        if dimensions is not None:
            params["dimensions"] = dimensions

        with self.logger.track_request("embedding", model):
            try:
                response = await self.client.embeddings.create(**params)
            except ProviderError:
                raise
            except Exception as e:
                raise ErrorMapper.map_error(e, "openai") from e

        usage = as_dict(getattr(response, "usage", None))
        record: Optional[UsageRecord]
        if usage:
            record = self.ledger.record_usage(usage, model)
        else:
            record = self.ledger.record_estimate(texts, model)
        if record is None:
            self.logger.debug("Embedding response reported empty usage", model=model)

        return [list(item.embedding) for item in response.data]
