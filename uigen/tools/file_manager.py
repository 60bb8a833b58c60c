"""file_manager — rename and delete files or directories in the virtual file system."""

import logging
from typing import Any

from pydantic import ValidationError

from uigen.exceptions import UIGenError
from uigen.tools.commands import FileManagerCommand
from uigen.types import RiskLevel, ToolDefinition, ToolResult
from uigen.vfs import VirtualFileSystem

logger = logging.getLogger(__name__)

TOOL_NAME = "file_manager"

DEFINITION = ToolDefinition(
    name=TOOL_NAME,
    description=(
        "Rename or delete files and directories. Renaming a directory moves "
        "everything inside it; deleting a directory removes it recursively."
    ),
    parameters={
        "type": "object",
        "properties": {
            "command": {"type": "string", "enum": ["rename", "delete"], "description": "The operation"},
            "path": {"type": "string", "description": "Absolute path of the file or directory"},
            "new_path": {"type": "string", "description": "Destination path (rename only)"},
        },
        "required": ["command", "path"],
    },
    risk_level=RiskLevel.HIGH,
)


class FileManagerTool:
    """File manager command surface bound to one VFS."""

    definition = DEFINITION

    def __init__(self, vfs: VirtualFileSystem):
        self.vfs = vfs

    async def execute(self, **params: Any) -> dict[str, Any]:
        """Validate and run one command; returns ``{success, message|error}``."""
        try:
            cmd = FileManagerCommand.model_validate(params)
        except ValidationError as exc:
            field = ".".join(str(p) for p in exc.errors()[0].get("loc", ())) or "params"
            return ToolResult(success=False, error=f"Invalid parameters: {field}").to_payload()
        return self.run(cmd).to_payload()

    def run(self, cmd: FileManagerCommand) -> ToolResult:
        if cmd.command == "rename":
            if not cmd.new_path:
                return ToolResult(success=False, error="new_path is required for rename command")
            return self.rename(cmd.path, cmd.new_path)
        if cmd.command == "delete":
            return self.delete(cmd.path)
        return ToolResult(success=False, error="Invalid command")

    def rename(self, path: str, new_path: str) -> ToolResult:
        try:
            self.vfs.rename(path, new_path)
        except UIGenError as exc:
            logger.debug(f"[FileManager] rename {path} → {new_path} failed: {exc}")
            return ToolResult(success=False, error=f"Failed to rename {path} to {new_path}")
        return ToolResult(success=True, message=f"Successfully renamed {path} to {new_path}")

    def delete(self, path: str) -> ToolResult:
        try:
            self.vfs.delete(path)
        except UIGenError as exc:
            logger.debug(f"[FileManager] delete {path} failed: {exc}")
            return ToolResult(success=False, error=f"Failed to delete {path}")
        return ToolResult(success=True, message=f"Successfully deleted {path}")


def build_file_manager_tool(vfs: VirtualFileSystem) -> FileManagerTool:
    return FileManagerTool(vfs)
