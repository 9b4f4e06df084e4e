from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .schema_utils import schema_from_callable


class ToolFunction(BaseModel):
    """A tool the model may call. Execution happens outside the stream."""
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )
    handler: Optional[Callable[..., Any]] = Field(None, exclude=True)

    @classmethod
    def from_callable(cls, func: Callable[..., Any], description: Optional[str] = None) -> "ToolFunction":
        """Build a tool from a Python function's signature and docstring."""
        return cls(
            name=func.__name__,
            description=description or (func.__doc__ or "").strip(),
            parameters=schema_from_callable(func),
            handler=func,
        )
