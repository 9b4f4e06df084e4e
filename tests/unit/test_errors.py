"""Tests for error mapping."""

import httpx
import pytest

from ensemble_stream.errors import EnsembleError, PauseAbortError, ProviderError, UnknownModelError
from ensemble_stream.providers.errors import ErrorMapper
from tests.helpers.mock_exceptions import (
    MockAuthenticationError,
    MockBadRequestError,
    MockOverloadedError,
    MockRateLimitError,
)


class TestErrorMapper:

    def test_rate_limit(self):
        error = ErrorMapper.map_error(MockRateLimitError(retry_after=30), "openai")

        assert isinstance(error, ProviderError)
        assert error.message == "OpenAI rate limit exceeded: Rate limit exceeded"
        assert error.status_code == 429
        assert error.retry_after == 30.0
        assert error.is_retryable
        assert isinstance(error.original_error, MockRateLimitError)

    def test_authentication(self):
        error = ErrorMapper.map_error(MockAuthenticationError(), "anthropic")

        assert error.message == "Claude authentication failed: Invalid API key"
        assert error.status_code == 401
        assert not error.is_retryable

    def test_bad_request_not_retryable(self):
        error = ErrorMapper.map_error(MockBadRequestError("bad field"), "openai")
        assert error.message == "OpenAI API error: bad field"
        assert not error.is_retryable

    def test_overloaded_is_retryable(self):
        assert ErrorMapper.is_retryable(MockOverloadedError())

    def test_httpx_timeout(self):
        error = ErrorMapper.map_error(httpx.ReadTimeout("read timed out"), "openai")
        assert error.message == "OpenAI request timed out: read timed out"
        assert error.is_retryable

    def test_rate_limit_phrase_without_status(self):
        assert ErrorMapper.is_retryable(Exception("Too Many Requests, slow down"))
        assert not ErrorMapper.is_retryable(ValueError("bad value"))

    def test_provider_error_passes_through(self):
        original = ProviderError("already mapped", provider="openai", status_code=401)
        assert ErrorMapper.map_error(original, "openai") is original

    def test_error_event_from_sdk_error(self):
        event = ErrorMapper.to_error_event(MockRateLimitError(retry_after=5), "anthropic")

        assert event.type == "error"
        assert event.error == "Claude rate limit exceeded: Rate limit exceeded"
        assert event.code == "429"
        assert event.recoverable
        assert event.metadata == {"retry_after": 5.0}

    def test_error_event_from_ensemble_error(self):
        event = ErrorMapper.to_error_event(UnknownModelError("llama-3"), "openai")
        assert event.error == "No provider available for model: llama-3"
        assert event.code == "unknown_model"

    def test_error_event_from_validation_error(self):
        event = ErrorMapper.to_error_event(ValueError("Invalid conversation item"), "openai")
        assert event.error == "OpenAI API error: Invalid conversation item"
        assert event.code == "provider_error"
        assert not event.recoverable


class TestErrorTypes:

    def test_pause_abort_defaults(self):
        error = PauseAbortError()
        assert error.code == "pause_aborted"
        assert "pause" in str(error)

    def test_hierarchy(self):
        assert issubclass(ProviderError, EnsembleError)
        with pytest.raises(EnsembleError):
            raise UnknownModelError("x")
