"""Field access helpers shared by the vendor parsers.

SDK stream events arrive as pydantic objects, but tests and replayed
captures hand over plain dicts; both are read the same way.
"""

from typing import Any, Dict, Optional


def attr(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from an SDK object or a plain dict."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def as_dict(obj: Any) -> Optional[Dict[str, Any]]:
    """Convert an SDK usage object (pydantic or plain) into a dict."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if hasattr(obj, "__dict__"):
        return {
            key: as_dict(value) if hasattr(value, "__dict__") else value
            for key, value in vars(obj).items()
            if not key.startswith("_")
        }
    return None
