"""Virtual file system: path utilities, node store, and the VFS itself."""

from uigen.vfs.filesystem import FileView, VirtualFileSystem
from uigen.vfs.paths import PathTree, normalize_path

__all__ = ["FileView", "VirtualFileSystem", "PathTree", "normalize_path"]
