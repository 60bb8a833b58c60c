"""str_replace_editor — view, create and edit files in the virtual file system.

Every outcome is a plain string. Failures start with ``Error:`` (or contain
``not found`` for lookups) so the agent can recognize them; nothing is raised
across the tool boundary.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from uigen.exceptions import AlreadyExists, UIGenError
from uigen.tools.commands import TextEditorCommand
from uigen.types import NodeType, RiskLevel, ToolDefinition
from uigen.vfs import VirtualFileSystem

logger = logging.getLogger(__name__)

TOOL_NAME = "str_replace_editor"

DEFINITION = ToolDefinition(
    name=TOOL_NAME,
    description=(
        "View, create and edit files in the project. Commands: view, create, "
        "str_replace, insert, undo_edit. Paths are absolute, rooted at '/'."
    ),
    parameters={
        "type": "object",
        "properties": {
            "command": {
                "type": "string",
                "enum": ["view", "create", "str_replace", "insert", "undo_edit"],
                "description": "The command to run",
            },
            "path": {"type": "string", "description": "Absolute path to a file or directory"},
            "file_text": {"type": "string", "description": "Content of the file to create"},
            "old_str": {"type": "string", "description": "Exact text to replace; must occur once"},
            "new_str": {"type": "string", "description": "Replacement text, or the line to insert"},
            "insert_line": {"type": "integer", "description": "Insert after this 0-based line"},
            "view_range": {
                "type": "array", "items": {"type": "integer"},
                "description": "[start, end] 1-based inclusive line range; end=-1 reads to the end",
            },
        },
        "required": ["command", "path"],
    },
    risk_level=RiskLevel.MEDIUM,
)

UNDO_UNSUPPORTED = (
    "Error: undo_edit command is not supported in this version. "
    "Use str_replace to revert changes."
)


class TextEditorTool:
    """Text editor command surface bound to one VFS."""

    definition = DEFINITION

    def __init__(self, vfs: VirtualFileSystem):
        self.vfs = vfs

    async def execute(self, **params: Any) -> str:
        """Validate and run one command. Always returns a string."""
        try:
            cmd = TextEditorCommand.model_validate(params)
        except ValidationError as exc:
            return f"Error: Invalid parameters: {_first_error(exc)}"
        return self.run(cmd)

    def run(self, cmd: TextEditorCommand) -> str:
        handler = {
            "view": lambda: self.view(cmd.path, cmd.view_range),
            "create": lambda: self.create(cmd.path, cmd.file_text or ""),
            "str_replace": lambda: self.str_replace(cmd.path, cmd.old_str, cmd.new_str),
            "insert": lambda: self.insert(cmd.path, cmd.insert_line, cmd.new_str),
            "undo_edit": lambda: UNDO_UNSUPPORTED,
        }.get(cmd.command)
        if handler is None:
            return f"Error: Invalid command: {cmd.command}"
        try:
            return handler()
        except UIGenError as exc:
            logger.debug(f"[TextEditor] {cmd.command} {cmd.path} failed: {exc}")
            return f"Error: {exc}"

    # ── Commands ──────────────────────────────────────────────────────────────

    def view(self, path: str, view_range: Optional[list[int]] = None) -> str:
        if self.vfs.is_directory(path):
            entries = self.vfs.list_entries(path)
            if not entries:
                return "(empty directory)"
            return "\n".join(
                f"{e.name}/" if e.type == NodeType.DIRECTORY else e.name for e in entries
            )

        content = self.vfs.read_file(path)
        if content is None:
            return f"Error: File not found: {path}"

        lines = content.split("\n")
        start, end = 1, len(lines)
        if view_range is not None:
            start, end = view_range
            if end == -1:
                end = len(lines)
            if start < 1 or start > len(lines) or end < start or end > len(lines):
                return (
                    f"Error: Line range {view_range} not found in {path} "
                    f"(file has {len(lines)} lines)"
                )
        return "\n".join(f"{n}\t{lines[n - 1]}" for n in range(start, end + 1))

    def create(self, path: str, file_text: str = "") -> str:
        try:
            self.vfs.create_file(path, file_text)
        except AlreadyExists:
            return f"Error: File already exists: {path}"
        return f"File created: {path}"

    def str_replace(self, path: str, old_str: Optional[str], new_str: Optional[str]) -> str:
        content = self.vfs.read_file(path)
        if content is None:
            return f"Error: File not found: {path}"
        if not old_str:
            return "Error: old_str is required for str_replace command"

        occurrences = content.count(old_str)
        if occurrences == 0:
            return f"Error: String not found in file: {path}"
        if occurrences > 1:
            return (
                f"Error: old_str occurs {occurrences} times in {path}. "
                "Include more surrounding context so it matches exactly once."
            )

        self.vfs.update_file(path, content.replace(old_str, new_str or "", 1))
        return f"Replaced text in {path}"

    def insert(self, path: str, insert_line: Optional[int], new_str: Optional[str]) -> str:
        content = self.vfs.read_file(path)
        if content is None:
            return f"Error: File not found: {path}"
        if new_str is None:
            return "Error: new_str is required for insert command"

        line = insert_line or 0
        lines = content.split("\n") if content else []
        if line < 0 or line > len(lines):
            return f"Error: insert_line {line} is out of range for {path} ({len(lines)} lines)"

        lines.insert(line, new_str)
        self.vfs.update_file(path, "\n".join(lines))
        return f"Text inserted at line {line} in {path}"


def build_text_editor_tool(vfs: VirtualFileSystem) -> TextEditorTool:
    return TextEditorTool(vfs)


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "params"
    return f"{field}: {err.get('msg', 'invalid')}"
