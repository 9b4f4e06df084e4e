"""Tests for strict-mode schema translation."""

import pytest

from ensemble_stream.agents.tools.schema_utils import (
    resolve_enum_values,
    schema_from_callable,
    strict_schema,
    strict_tool_parameters,
)
from ensemble_stream.errors import SchemaTranslationError


WEATHER_SCHEMA = {
    "type": "object",
    "properties": {
        "city": {"type": "string", "minLength": 1, "pattern": "^[A-Z]"},
        "days": {"type": "integer", "minimum": 1, "maximum": 14, "default": 3, "optional": True},
        "units": {"oneOf": [{"type": "string", "enum": ["c", "f"]}, {"type": "null"}]},
        "filters": {
            "type": "object",
            "properties": {
                "min_temp": {"type": "number", "optional": True},
                "tags": {"type": "array", "items": {"type": "string", "format": "slug"}, "minItems": 1},
            },
        },
    },
}


class TestStrictSchema:

    def test_removes_unsupported_keywords(self):
        result = strict_schema(WEATHER_SCHEMA)

        assert result["properties"]["city"] == {"type": "string"}
        assert result["properties"]["days"] == {"type": "integer"}
        assert result["properties"]["filters"]["properties"]["tags"] == {
            "type": "array",
            "items": {"type": "string"},
        }

    def test_one_of_becomes_any_of(self):
        units = strict_schema(WEATHER_SCHEMA)["properties"]["units"]
        assert "oneOf" not in units
        assert units["anyOf"] == [{"type": "string", "enum": ["c", "f"]}, {"type": "null"}]

    def test_objects_are_closed_and_fully_required(self):
        result = strict_schema(WEATHER_SCHEMA)

        assert result["additionalProperties"] is False
        assert result["required"] == ["city", "days", "units", "filters"]
        nested = result["properties"]["filters"]
        assert nested["additionalProperties"] is False
        assert nested["required"] == ["min_temp", "tags"]

    def test_input_is_not_mutated(self):
        original = {"type": "object", "properties": {"a": {"type": "string", "minLength": 2}}}
        strict_schema(original)
        assert original == {"type": "object", "properties": {"a": {"type": "string", "minLength": 2}}}

    def test_idempotent(self):
        once = strict_schema(WEATHER_SCHEMA)
        assert strict_schema(once) == once

        tool_once = strict_tool_parameters(WEATHER_SCHEMA)
        assert strict_tool_parameters(tool_once) == tool_once

    def test_empty_object_has_no_required(self):
        result = strict_schema({"type": "object", "properties": {}})
        assert "required" not in result
        assert result["additionalProperties"] is False

    def test_array_of_objects(self):
        schema = {
            "type": "array",
            "items": {"type": "object", "properties": {"x": {"type": "integer", "minimum": 0}}},
        }
        result = strict_schema(schema)
        assert result["items"] == {
            "type": "object",
            "properties": {"x": {"type": "integer"}},
            "required": ["x"],
            "additionalProperties": False,
        }


class TestStrictToolParameters:

    def test_top_level_optional_kept_out_of_required(self):
        result = strict_tool_parameters(WEATHER_SCHEMA)

        assert result["required"] == ["city", "units", "filters"]
        assert "optional" not in result["properties"]["days"]

    def test_nested_optional_is_still_required(self):
        nested = strict_tool_parameters(WEATHER_SCHEMA)["properties"]["filters"]
        assert nested["required"] == ["min_temp", "tags"]
        assert "optional" not in nested["properties"]["min_temp"]

    def test_explicit_required_list_is_respected(self):
        schema = {
            "type": "object",
            "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
            "required": ["a"],
        }
        assert strict_tool_parameters(schema)["required"] == ["a"]

    def test_all_optional_keeps_empty_required(self):
        schema = {"type": "object", "properties": {"a": {"type": "string", "optional": True}}}
        result = strict_tool_parameters(schema)
        assert result["required"] == []
        assert strict_tool_parameters(result) == result

    def test_rejects_non_object_schema(self):
        with pytest.raises(SchemaTranslationError, match="got list") as exc_info:
            strict_schema([{"type": "string"}])
        assert exc_info.value.code == "schema_error"


class TestResolveEnumValues:

    @pytest.mark.asyncio
    async def test_static_enum_untouched(self):
        schema = {"type": "string", "enum": ["a", "b"]}
        assert await resolve_enum_values(schema) == schema

    @pytest.mark.asyncio
    async def test_sync_callable(self):
        schema = {"type": "object", "properties": {"color": {"type": "string", "enum": lambda: ["red", "blue"]}}}
        result = await resolve_enum_values(schema)
        assert result["properties"]["color"]["enum"] == ["red", "blue"]

    @pytest.mark.asyncio
    async def test_async_callable(self):
        async def load():
            return ("x", "y")

        result = await resolve_enum_values({"type": "string", "enum": load})
        assert result == {"type": "string", "enum": ["x", "y"]}

    @pytest.mark.asyncio
    async def test_failing_callable_drops_enum(self):
        def broken():
            raise RuntimeError("backend down")

        result = await resolve_enum_values({"type": "string", "enum": broken})
        assert result == {"type": "string"}

    @pytest.mark.asyncio
    async def test_empty_callable_drops_enum(self):
        result = await resolve_enum_values({"type": "string", "enum": lambda: []})
        assert result == {"type": "string"}


class TestSchemaFromCallable:

    def test_maps_types_and_defaults(self):
        def search(query: str, tags: list, limit: int = 10, exact: bool = False):
            """Search documents."""

        schema = schema_from_callable(search)

        assert schema["properties"]["query"] == {"type": "string"}
        assert schema["properties"]["limit"] == {"type": "integer", "optional": True}
        assert schema["properties"]["exact"] == {"type": "boolean", "optional": True}
        assert schema["properties"]["tags"]["type"] == "array"

    def test_strict_translation_of_callable_schema(self):
        def lookup(city: str, days: int = 3):
            pass

        parameters = strict_tool_parameters(schema_from_callable(lookup))

        assert parameters["required"] == ["city"]
        assert parameters["additionalProperties"] is False
