"""Editing tools exposed to the agent loop: text editor and file manager."""

from uigen.tools.executor import ToolExecutor
from uigen.tools.file_manager import FileManagerTool, build_file_manager_tool
from uigen.tools.registry import ToolRegistry, build_tool_registry
from uigen.tools.text_editor import TextEditorTool, build_text_editor_tool

__all__ = [
    "ToolExecutor", "ToolRegistry", "build_tool_registry",
    "TextEditorTool", "build_text_editor_tool",
    "FileManagerTool", "build_file_manager_tool",
]
