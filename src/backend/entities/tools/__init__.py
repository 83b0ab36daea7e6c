"""Tool invocation for external assistants."""

from .registry import ToolRegistry, create_tool_registry

__all__ = ["ToolRegistry", "create_tool_registry"]
