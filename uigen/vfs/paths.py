"""Path normalization and the path-keyed node store behind the VFS.

PathTree knows about hierarchy only: which nodes exist, which directory owns
which children. It never interprets file content.
"""

import bisect
from typing import Iterator, Optional

from uigen.types import FileNode, NodeType

ROOT = "/"


# ── Path helpers ──────────────────────────────────────────────────────────────

def normalize_path(path: str) -> str:
    """Return the absolute POSIX form of ``path``.

    Backslashes become separators, empty and ``.`` segments are dropped and
    ``..`` pops a segment without ever climbing above the root.

    >>> normalize_path("components//ui/../Button.jsx")
    '/components/Button.jsx'
    """
    segments: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if segments:
                segments.pop()
            continue
        segments.append(segment)
    return ROOT + "/".join(segments)


def parent_path(path: str) -> Optional[str]:
    """Parent directory of a normalized path; None for the root."""
    if path == ROOT:
        return None
    head = path.rsplit("/", 1)[0]
    return head or ROOT


def base_name(path: str) -> str:
    return "" if path == ROOT else path.rsplit("/", 1)[1]


def join_path(parent: str, name: str) -> str:
    return normalize_path(f"{parent}/{name}")


def is_descendant(path: str, ancestor: str) -> bool:
    """True when ``path`` lies strictly below ``ancestor``."""
    if ancestor == ROOT:
        return path != ROOT
    return path.startswith(ancestor + "/")


def split_extension(path: str) -> tuple[str, str]:
    """Split ``/a/b.test.jsx`` into ``("/a/b.test", ".jsx")``; dotfiles have no extension."""
    name = base_name(path)
    dot = name.rfind(".")
    if dot <= 0:
        return path, ""
    cut = len(path) - (len(name) - dot)
    return path[:cut], path[cut:]


def ancestors(path: str) -> list[str]:
    """All ancestor directories of ``path``, root first."""
    chain = []
    current = parent_path(path)
    while current is not None:
        chain.append(current)
        current = parent_path(current)
    return list(reversed(chain))


# ── Node store ────────────────────────────────────────────────────────────────

class PathTree:
    """Ordered node store keyed by normalized absolute path.

    The root directory is created on construction and survives ``clear()``.
    Children lists are kept sorted so every traversal is deterministic.
    """

    def __init__(self):
        self._nodes: dict[str, FileNode] = {}
        self.clear()

    def clear(self) -> None:
        self._nodes = {ROOT: FileNode(path=ROOT, name="", type=NodeType.DIRECTORY)}

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self.descendants(ROOT, include_self=True))

    def contains(self, path: str) -> bool:
        return path in self._nodes

    def get(self, path: str) -> Optional[FileNode]:
        return self._nodes.get(path)

    def insert(self, node: FileNode) -> None:
        """Add ``node`` under its (existing) parent directory.

        Raises:
            KeyError: if the path is taken or the parent directory is missing
        """
        if node.path in self._nodes:
            raise KeyError(f"Node already exists: {node.path}")
        parent = self._nodes.get(parent_path(node.path) or "")
        if parent is None or parent.type != NodeType.DIRECTORY:
            raise KeyError(f"Parent directory missing for: {node.path}")
        self._nodes[node.path] = node
        bisect.insort(parent.children, node.path)

    def remove(self, path: str) -> FileNode:
        """Detach a single node from the tree. Descendants are the caller's concern."""
        node = self._nodes.pop(path)
        parent = self._nodes.get(parent_path(path) or "")
        if parent is not None and path in parent.children:
            parent.children.remove(path)
        return node

    def ensure_directories(self, path: str) -> list[str]:
        """Create every missing directory on the way to (and including) ``path``.

        Returns:
            The paths that were created, outermost first

        Raises:
            KeyError: if a file sits where a directory is needed
        """
        created = []
        for current in ancestors(path) + [path]:
            existing = self._nodes.get(current)
            if existing is None:
                self.insert(FileNode(path=current, name=base_name(current), type=NodeType.DIRECTORY))
                created.append(current)
            elif existing.type != NodeType.DIRECTORY:
                raise KeyError(f"Not a directory: {current}")
        return created

    def descendants(self, path: str, include_self: bool = False) -> list[str]:
        """Depth-first pre-order paths below ``path`` (children in sorted order)."""
        out = [path] if include_self else []
        stack = list(reversed(self._nodes[path].children))
        while stack:
            current = stack.pop()
            out.append(current)
            stack.extend(reversed(self._nodes[current].children))
        return out

    def walk_files(self, path: str = ROOT) -> Iterator[FileNode]:
        for current in self.descendants(path):
            node = self._nodes[current]
            if node.type == NodeType.FILE:
                yield node

    def nodes(self) -> dict[str, FileNode]:
        """The live node table. Only the VFS may hold on to it."""
        return self._nodes

    def replace_nodes(self, nodes: dict[str, FileNode]) -> None:
        """Swap in a fully built node table in one assignment."""
        self._nodes = nodes
