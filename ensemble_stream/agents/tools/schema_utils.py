"""JSON schema helpers for tool parameters.

OpenAI strict mode accepts only a subset of JSON schema: every object must
close ``additionalProperties`` and list all of its properties as required,
and validation keywords such as ``minimum`` or ``pattern`` are rejected.
``strict_schema`` rewrites a schema into that subset without touching the
input.
"""

from __future__ import annotations

import copy
import inspect
import logging
import typing as t

from ...errors import SchemaTranslationError

logger = logging.getLogger(__name__)

UNSUPPORTED_KEYWORDS = frozenset([
    "minimum", "maximum", "minItems", "maxItems", "minLength", "maxLength",
    "pattern", "format", "multipleOf", "patternProperties",
    "unevaluatedProperties", "propertyNames", "minProperties", "maxProperties",
    "unevaluatedItems", "contains", "minContains", "maxContains", "uniqueItems",
    "default",
])


def _is_object(node: dict) -> bool:
    node_type = node.get("type")
    if isinstance(node_type, list):
        return "object" in node_type
    return node_type == "object" or (node_type is None and "properties" in node)


def _is_array(node: dict) -> bool:
    node_type = node.get("type")
    if isinstance(node_type, list):
        return "array" in node_type
    return node_type == "array"


def _translate(node: t.Any) -> t.Any:
    if not isinstance(node, dict):
        return node

    result = {
        key: value for key, value in node.items()
        if key != "optional" and key not in UNSUPPORTED_KEYWORDS
    }

    if "oneOf" in result:
        result["anyOf"] = result.pop("oneOf")

    for key in ("anyOf", "allOf"):
        if isinstance(result.get(key), list):
            result[key] = [_translate(sub) for sub in result[key]]

    if _is_object(result):
        properties = result.get("properties")
        if isinstance(properties, dict) and properties:
            result["properties"] = {name: _translate(sub) for name, sub in properties.items()}
            # Nested objects always require every property
            result["required"] = list(properties.keys())
        else:
            result.pop("required", None)
        result["additionalProperties"] = False
    elif _is_array(result) and "items" in result:
        items = result["items"]
        if isinstance(items, list):
            result["items"] = [_translate(sub) for sub in items]
        else:
            result["items"] = _translate(items)

    return result


def _is_optional(name: str, prop: t.Any, declared_required: t.Optional[list]) -> bool:
    if isinstance(prop, dict) and prop.get("optional") is True:
        return True
    return declared_required is not None and name not in declared_required


def strict_schema(schema: dict, preserve_optional: bool = False) -> dict:
    """Return a strict-mode copy of ``schema``.

    With ``preserve_optional`` the top-level ``required`` list keeps out
    properties marked ``optional: true`` or left out of an explicit
    ``required`` list. Nested objects always require all their properties.
    Applying the function to its own output returns an equal schema.

    Raises:
        SchemaTranslationError: ``schema`` is not a JSON object
    """
    if not isinstance(schema, dict):
        raise SchemaTranslationError(
            f"Schema must be a JSON object, got {type(schema).__name__}"
        )
    source = copy.deepcopy(schema)
    result = _translate(source)

    properties = source.get("properties")
    if preserve_optional and isinstance(properties, dict) and properties:
        declared = source.get("required")
        declared_required = declared if isinstance(declared, list) else None
        result["required"] = [
            name for name, prop in properties.items()
            if not _is_optional(name, prop, declared_required)
        ]

    if properties and "additionalProperties" not in result:
        result["additionalProperties"] = False

    return result


def strict_tool_parameters(parameters: dict) -> dict:
    """Strict translation for function tool parameters, keeping top-level optionals."""
    return strict_schema(parameters, preserve_optional=True)


async def resolve_enum_values(schema: t.Any) -> t.Any:
    """Return a copy of ``schema`` with callable ``enum`` values resolved.

    An enum may be a plain list or a sync/async callable producing one. When
    the callable fails or produces nothing the ``enum`` key is dropped so the
    parameter falls back to its plain type.
    """
    if isinstance(schema, list):
        return [await resolve_enum_values(item) for item in schema]
    if not isinstance(schema, dict):
        return schema

    resolved: dict = {}
    for key, value in schema.items():
        if key == "enum" and callable(value):
            try:
                values = value()
                if inspect.isawaitable(values):
                    values = await values
            except Exception as e:
                logger.warning("Failed to resolve enum values, dropping enum: %s", e)
                continue
            if values:
                resolved[key] = list(values)
            else:
                logger.warning("Enum callable returned no values, dropping enum")
        else:
            resolved[key] = await resolve_enum_values(value)
    return resolved


def schema_from_callable(func: t.Callable) -> dict:
    """Generate a minimal JSON schema for a Python callable's keyword parameters.

    - Types: int, float, bool, str, list[T], dict map to JSON schema types.
    - Parameters with default values are marked ``optional``.
    """
    sig = inspect.signature(func)
    try:
        hints = t.get_type_hints(func)
    except (NameError, TypeError):
        hints = {}
    properties: dict[str, dict] = {}

    def map_type(ann: t.Any) -> dict:
        origin = t.get_origin(ann) or ann
        args = t.get_args(ann)
        if origin is bool:
            return {"type": "boolean"}
        if origin is int:
            return {"type": "integer"}
        if origin is float:
            return {"type": "number"}
        if origin is list:
            return {"type": "array", "items": map_type(args[0]) if args else {"type": "string"}}
        if origin is dict:
            return {"type": "object"}
        return {"type": "string"}

    for name, param in sig.parameters.items():
        if param.kind not in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
            continue
        ann = hints.get(name, str)
        prop = map_type(ann)
        if param.default is not inspect.Parameter.empty:
            prop["optional"] = True
        properties[name] = prop

    return {"type": "object", "properties": properties}
