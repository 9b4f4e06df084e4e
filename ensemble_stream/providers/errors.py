"""
Error mapping utilities for provider adapters.

Converts SDK and transport exceptions raised while opening a stream into
``ProviderError`` instances and canonical ``error`` events.
"""

from typing import Optional

import httpx

from ..errors import EnsembleError, ProviderError
from ..models.events import ErrorEvent

PROVIDER_LABELS = {
    "openai": "OpenAI",
    "anthropic": "Claude",
}

RATE_LIMIT_PHRASES = ('rate limit', 'too many requests', 'quota exceeded', 'too_many_requests')


class ErrorMapper:
    """Maps provider-specific errors to standardized ProviderError."""

    # Common HTTP status codes that indicate retryable errors
    RETRYABLE_STATUS_CODES = {408, 409, 429, 500, 502, 503, 504, 529}

    @staticmethod
    def get_status_code(error: Exception) -> Optional[int]:
        status_code = getattr(error, 'status_code', None)
        if isinstance(status_code, int):
            return status_code
        if isinstance(error, httpx.HTTPStatusError):
            return error.response.status_code
        return None

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """Whether the caller may reasonably retry the request."""
        if isinstance(error, EnsembleError):
            return error.recoverable

        status_code = ErrorMapper.get_status_code(error)
        if status_code is not None and status_code in ErrorMapper.RETRYABLE_STATUS_CODES:
            return True

        if isinstance(error, (httpx.TimeoutException, httpx.ConnectError)):
            return True

        message = str(getattr(error, 'message', None) or error).lower()
        return any(phrase in message for phrase in RATE_LIMIT_PHRASES)

    @staticmethod
    def get_retry_after(error: Exception) -> Optional[float]:
        """Extract a Retry-After value in seconds, if the error carries one."""
        response = getattr(error, 'response', None)
        headers = getattr(response, 'headers', None)
        if headers is not None:
            retry_after = headers.get('retry-after')
            if retry_after:
                try:
                    return float(retry_after)
                except ValueError:
                    pass

        retry_after = getattr(error, 'retry_after', None)
        if isinstance(retry_after, (int, float)):
            return float(retry_after)
        return None

    @staticmethod
    def map_error(error: Exception, provider: str) -> ProviderError:
        """Wrap ``error`` in a ProviderError with retry metadata."""
        if isinstance(error, ProviderError):
            return error

        label = PROVIDER_LABELS.get(provider, provider)
        status_code = ErrorMapper.get_status_code(error)
        detail = getattr(error, 'message', None) or str(error) or type(error).__name__

        if status_code == 401:
            message = f"{label} authentication failed: {detail}"
        elif status_code == 429:
            message = f"{label} rate limit exceeded: {detail}"
        elif isinstance(error, httpx.TimeoutException):
            message = f"{label} request timed out: {detail}"
        else:
            message = f"{label} API error: {detail}"

        provider_error = ProviderError(
            message=message,
            provider=provider,
            status_code=status_code,
            retry_after=ErrorMapper.get_retry_after(error),
        )
        provider_error.recoverable = ErrorMapper.is_retryable(error)
        provider_error.original_error = error
        return provider_error

    @staticmethod
    def to_error_event(error: Exception, provider: str) -> ErrorEvent:
        """Canonical error event for an exception raised outside the translator."""
        if isinstance(error, EnsembleError) and not isinstance(error, ProviderError):
            return ErrorEvent(error=error.message, code=error.code, recoverable=error.recoverable)
        mapped = ErrorMapper.map_error(error, provider)
        return ErrorEvent(
            error=mapped.message,
            code=str(mapped.status_code) if mapped.status_code else mapped.code,
            recoverable=mapped.is_retryable,
            metadata={"retry_after": mapped.retry_after} if mapped.retry_after else {},
        )
