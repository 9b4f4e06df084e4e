"""Usage record model forwarded to the cost ledger."""

import time
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class UsageRecord(BaseModel):
    """Token usage for a single provider call."""
    model_config = ConfigDict(protected_namespaces=())

    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0
    image_count: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: float = Field(default_factory=time.time)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens
