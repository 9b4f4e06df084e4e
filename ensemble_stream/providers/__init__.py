"""Provider adapters and model-to-provider routing."""

from typing import Optional

from ..config.constants import PROVIDER_MODEL_PREFIXES
from .anthropic import AnthropicProvider
from .base import ImagePreprocessor, PreparedRequest, ProviderAdapter
from .openai import OpenAIProvider

PROVIDER_CLASSES = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def provider_name_for_model(model: str) -> Optional[str]:
    """Provider name for a model identifier, or None when no family matches."""
    for provider, prefixes in PROVIDER_MODEL_PREFIXES.items():
        if model.startswith(prefixes):
            return provider
    return None


__all__ = [
    "AnthropicProvider",
    "ImagePreprocessor",
    "OpenAIProvider",
    "PROVIDER_CLASSES",
    "PreparedRequest",
    "ProviderAdapter",
    "provider_name_for_model",
]
