"""
Agent definition models.

An agent definition travels with every stream call: it names the tools the
model may call, the sampling settings, and the cancellation token observed
by the stream.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..tools.tool_definition import ToolFunction


class ModelSettings(BaseModel):
    """Sampling and output settings for a single request."""
    model_config = ConfigDict(extra="forbid")

    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(None, ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(None, ge=1)
    tool_choice: Optional[Union[str, Dict[str, Any]]] = Field(
        None, description="'auto', 'none', 'required' or {'type': 'function', 'function': {'name': ...}}"
    )
    json_schema: Optional[Dict[str, Any]] = Field(
        None, description="Structured output schema: {'name', 'schema', 'strict'?}"
    )

    @field_validator("json_schema")
    @classmethod
    def validate_json_schema(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if v is not None and "schema" not in v:
            raise ValueError("json_schema must contain a 'schema' key")
        return v


class AgentDefinition(BaseModel):
    """Definition of the agent on whose behalf a stream runs."""
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    agent_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: Optional[str] = None
    tools: List[ToolFunction] = Field(default_factory=list)
    model_settings: ModelSettings = Field(default_factory=ModelSettings)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    # Cancellation token (set programmatically, never serialized)
    cancel_event: asyncio.Event = Field(default_factory=asyncio.Event, exclude=True)

    def cancel(self) -> None:
        """Request cooperative cancellation of streams using this definition."""
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()
