from .schema_utils import resolve_enum_values, strict_schema, strict_tool_parameters
from .tool_definition import ToolFunction

__all__ = ["ToolFunction", "resolve_enum_values", "strict_schema", "strict_tool_parameters"]
