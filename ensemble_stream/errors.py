"""
Exception hierarchy for Ensemble Stream.

Nothing in this hierarchy escapes a stream: the translator converts every
failure into a canonical ``error`` event. These types exist so that setup
code, collaborators and tests can tell failure kinds apart.
"""

from typing import Optional


class EnsembleError(Exception):
    """Base error carrying a short machine-readable code."""

    def __init__(self, message: str, code: str = "ensemble_error", recoverable: bool = False):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable


class ProviderError(EnsembleError):
    """
    Raised for vendor transport and API failures.

    Attributes:
        provider: Provider name
        status_code: HTTP status code if applicable
        retry_after: Seconds to wait before retry if applicable
        original_error: The wrapped SDK exception, if any
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(message, code="provider_error")
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        self.original_error: Optional[Exception] = None

    @property
    def is_retryable(self) -> bool:
        return self.recoverable


class PauseAbortError(EnsembleError):
    """Raised when a cancellation token fires while waiting for a pause to clear."""

    def __init__(self, message: str = "Operation aborted while waiting for pause"):
        super().__init__(message, code="pause_aborted")


class SchemaTranslationError(EnsembleError):
    """Raised when a tool parameter schema cannot be made strict."""

    def __init__(self, message: str):
        super().__init__(message, code="schema_error")


class UnknownModelError(EnsembleError):
    """Raised when no provider is registered for a model identifier."""

    def __init__(self, model: str):
        super().__init__(f"No provider available for model: {model}", code="unknown_model")
        self.model = model
