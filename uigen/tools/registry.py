"""Central registry of the tools an agent loop may call against one project."""

from typing import Any, Callable

from uigen.types import ToolDefinition
from uigen.exceptions import ToolError
from uigen.vfs import VirtualFileSystem


class ToolRegistry:
    """Central registry of all available tools."""

    def __init__(self):
        self._tools: dict[str, ToolDefinition] = {}
        self._implementations: dict[str, Callable[..., Any]] = {}

    def register(self, definition: ToolDefinition, implementation: Callable[..., Any]) -> None:
        """Register a tool with its definition and implementation function.

        Args:
            definition: Tool metadata and schema
            implementation: Async callable that executes the tool
        """
        self._tools[definition.name] = definition
        self._implementations[definition.name] = implementation

    def get(self, name: str) -> tuple[ToolDefinition, Callable[..., Any]]:
        """Get tool definition and implementation.

        Raises:
            ToolError: if tool not found
        """
        if name not in self._tools:
            raise ToolError(f"Tool '{name}' not found in registry", tool_name=name)
        return self._tools[name], self._implementations[name]

    def list_tools(self) -> list[ToolDefinition]:
        """List all registered tools."""
        return list(self._tools.values())

    def get_schema_for_llm(self) -> list[dict]:
        """Format tool definitions for LLM function calling.

        Returns:
            List of dicts matching the OpenAI/Anthropic tool format
        """
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameters,
                },
            }
            for tool in self._tools.values()
        ]


def build_tool_registry(vfs: VirtualFileSystem) -> ToolRegistry:
    """Registry with the text editor and file manager bound to ``vfs``."""
    from uigen.tools.file_manager import build_file_manager_tool
    from uigen.tools.text_editor import build_text_editor_tool

    registry = ToolRegistry()
    for tool in (build_text_editor_tool(vfs), build_file_manager_tool(vfs)):
        registry.register(tool.definition, tool.execute)
    return registry
