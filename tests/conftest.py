"""Shared pytest fixtures for Ensemble Stream tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file for tests
load_dotenv()

from ensemble_stream.core.pause import PauseController
from ensemble_stream.models.streaming import StreamingOptions
from ensemble_stream.observability.cost_ledger import CostLedgerAdapter
from ensemble_stream.observability.request_log import add_request_logger, clear_request_loggers
from ensemble_stream.observability.sinks import InMemoryCostLedger, InMemoryRequestLogger
from ensemble_stream.providers.anthropic import AnthropicProvider
from ensemble_stream.providers.openai import OpenAIProvider
from tests.helpers.streaming_mocks import async_stream


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Mock environment variables for testing."""
    env_vars = {
        "OPENAI_API_KEY": "test-openai-key",
        "ANTHROPIC_API_KEY": "test-anthropic-key",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def ledger():
    return InMemoryCostLedger()


@pytest.fixture
def pause_controller():
    return PauseController()


@pytest.fixture
def options():
    """Deterministic buffering: size-based flushes only."""
    return StreamingOptions(delta_flush_interval_ms=60_000)


@pytest.fixture
def ledger_adapter(ledger):
    return CostLedgerAdapter("openai", ledger)


@pytest.fixture
def request_logger():
    sink = InMemoryRequestLogger()
    add_request_logger(sink)
    yield sink
    clear_request_loggers()


@pytest.fixture
def mock_openai_client():
    """OpenAI client whose responses.create returns the stream set on ``stream_events``."""
    client = MagicMock()
    client.stream_events = []
    client.responses.create = AsyncMock(side_effect=lambda **kwargs: async_stream(client.stream_events))
    return client


@pytest.fixture
def mock_anthropic_client():
    """Anthropic client whose messages.create returns the stream set on ``stream_events``."""
    client = MagicMock()
    client.stream_events = []
    client.messages.create = AsyncMock(side_effect=lambda **kwargs: async_stream(client.stream_events))
    return client


@pytest.fixture
def openai_provider(mock_openai_client, ledger, pause_controller, options):
    provider = OpenAIProvider(
        api_key="test-openai-key",
        pause_controller=pause_controller,
        cost_ledger=ledger,
        options=options,
    )
    provider._client = mock_openai_client
    return provider


@pytest.fixture
def anthropic_provider(mock_anthropic_client, ledger, pause_controller, options):
    provider = AnthropicProvider(
        api_key="test-anthropic-key",
        pause_controller=pause_controller,
        cost_ledger=ledger,
        options=options,
    )
    provider._client = mock_anthropic_client
    return provider
