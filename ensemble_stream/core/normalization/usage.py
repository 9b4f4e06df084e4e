"""
Usage normalization module.

Maps a vendor usage payload onto a ``UsageRecord``. Providers hand over the
usage dict exactly as the SDK reported it; the field mapping lives here.
"""

import math
from typing import Any, Dict, Iterable, Optional

from ...config.constants import CHARS_PER_TOKEN
from ...models.usage import UsageRecord


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _details(usage_data: Dict[str, Any], key: str) -> Dict[str, Any]:
    details = usage_data.get(key)
    return details if isinstance(details, dict) else {}


def to_usage_record(
    usage_data: Optional[Dict[str, Any]],
    provider: str,
    model: str,
    image_count: int = 0,
) -> Optional[UsageRecord]:
    """
    Build a UsageRecord from a raw usage payload.

    Returns None when the payload is missing or empty: no record is emitted
    for events that carry no usage.

    Args:
        usage_data: Raw usage dict from the provider
        provider: Provider name for field mapping
        model: Model the usage belongs to
        image_count: Images sent with the request
    """
    if not usage_data:
        return None

    metadata: Dict[str, Any] = {}

    if provider == "anthropic":
        input_tokens = _as_int(usage_data.get("input_tokens"))
        output_tokens = _as_int(usage_data.get("output_tokens"))
        cache_creation = _as_int(usage_data.get("cache_creation_input_tokens"))
        cache_read = _as_int(usage_data.get("cache_read_input_tokens"))
        cached_tokens = cache_creation + cache_read
        if cache_creation or cache_read:
            metadata["cache_creation_input_tokens"] = cache_creation
            metadata["cache_read_input_tokens"] = cache_read
    elif "input_tokens" in usage_data or "output_tokens" in usage_data:
        # OpenAI Responses API
        input_tokens = _as_int(usage_data.get("input_tokens"))
        output_tokens = _as_int(usage_data.get("output_tokens"))
        cached_tokens = _as_int(_details(usage_data, "input_tokens_details").get("cached_tokens"))
        reasoning = _details(usage_data, "output_tokens_details").get("reasoning_tokens")
        if reasoning is not None:
            metadata["reasoning_tokens"] = _as_int(reasoning)
    else:
        # Chat Completions / embeddings shape
        input_tokens = _as_int(usage_data.get("prompt_tokens"))
        output_tokens = _as_int(usage_data.get("completion_tokens"))
        cached_tokens = _as_int(_details(usage_data, "prompt_tokens_details").get("cached_tokens"))

    if "total_tokens" in usage_data:
        metadata["total_tokens"] = _as_int(usage_data.get("total_tokens"))

    return UsageRecord(
        model=model,
        provider=provider,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        cached_tokens=cached_tokens,
        image_count=image_count,
        metadata=metadata,
    )


def estimate_tokens(text: str) -> int:
    """Character-based estimate used only when a vendor reports no usage at all."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_usage_record(texts: Iterable[str], provider: str, model: str) -> UsageRecord:
    """Estimated input-only usage for requests whose response has no usage field."""
    return UsageRecord(
        model=model,
        provider=provider,
        input_tokens=sum(estimate_tokens(text) for text in texts),
        metadata={"estimated": True},
    )
