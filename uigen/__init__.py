"""UIGen — virtual file system, editing tools and live preview for generated React components.

Usage:
    from uigen import VirtualFileSystem, build_preview

    vfs = VirtualFileSystem.from_files({"/App.jsx": "export default () => <h1>Hi</h1>"})
    result = build_preview(vfs.snapshot(), dark_mode=True)
"""

from uigen.types import (
    FileNode, SerializedNode, NodeType, ToolDefinition, ToolResult, RiskLevel,
    GraphError, GraphErrorKind, PreviewResult, PreviewState,
)
from uigen.exceptions import (
    UIGenError, FileSystemError, NotFound, AlreadyExists, InvalidPath,
    ToolError, InvalidCommand, PreviewError, TransformFailure,
    UnresolvedImport, NoEntryPoint, EmptyProject,
)
from uigen.vfs import VirtualFileSystem, PathTree
from uigen.preview import PREVIEW_SANDBOX, PreviewSession, ThemeState, build_preview
from uigen.version import __version__

__all__ = [
    "FileNode", "SerializedNode", "NodeType", "ToolDefinition", "ToolResult", "RiskLevel",
    "GraphError", "GraphErrorKind", "PreviewResult", "PreviewState",
    "UIGenError", "FileSystemError", "NotFound", "AlreadyExists", "InvalidPath",
    "ToolError", "InvalidCommand", "PreviewError", "TransformFailure",
    "UnresolvedImport", "NoEntryPoint", "EmptyProject",
    "VirtualFileSystem", "PathTree",
    "PREVIEW_SANDBOX", "PreviewSession", "ThemeState", "build_preview",
    "__version__",
]
