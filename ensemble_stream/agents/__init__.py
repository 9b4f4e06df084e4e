"""Agent definitions and tool schemas."""

from .models.agent_definition import AgentDefinition, ModelSettings
from .tools.tool_definition import ToolFunction

__all__ = ["AgentDefinition", "ModelSettings", "ToolFunction"]
