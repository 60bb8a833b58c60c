"""In-memory virtual file system: the single source of truth for project contents.

Every successful mutation bumps ``refresh_counter`` and then notifies
subscribers with the new value. Consumers use the counter as their only
change signal; they never diff content themselves.
"""

import json
import logging
import threading
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from pydantic import ValidationError

from uigen.exceptions import AlreadyExists, InvalidPath, NotFound
from uigen.types import FileNode, NodeType, SerializedNode
from uigen.vfs.paths import (
    ROOT, PathTree, ancestors, base_name, is_descendant, normalize_path, parent_path,
)

logger = logging.getLogger(__name__)

Listener = Callable[[int], None]


class FileView:
    """Lazy, restartable sequence of ``(path, content)`` pairs for files.

    Nothing is read until iteration starts; each iteration takes a fresh
    snapshot, so iterating twice over an unchanged tree yields the same
    sequence in the same order.
    """

    def __init__(self, vfs: "VirtualFileSystem", root: str = ROOT):
        self._vfs = vfs
        self._root = root

    def __iter__(self) -> Iterator[tuple[str, str]]:
        with self._vfs._lock:
            if not self._vfs._tree.contains(self._root):
                return iter(())
            pairs = [(n.path, n.content) for n in self._vfs._tree.walk_files(self._root)]
        return iter(pairs)

    def paths(self) -> list[str]:
        return [path for path, _ in self]


class VirtualFileSystem:
    """Path-addressed file/directory tree held entirely in memory.

    Usage:
        fs = VirtualFileSystem()
        fs.create_file("/App.jsx", "export default function App() {}")
        fs.rename("/App.jsx", "/src/App.jsx")
        payload = fs.serialize()
    """

    def __init__(self):
        self._tree = PathTree()
        self._lock = threading.RLock()
        self._refresh_counter = 0
        self._listeners: list[Listener] = []

    # ── Change signal ─────────────────────────────────────────────────────────

    @property
    def refresh_counter(self) -> int:
        return self._refresh_counter

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(refresh_counter)`` after every successful mutation.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _bump(self) -> int:
        self._refresh_counter += 1
        return self._refresh_counter

    def _notify(self, counter: int) -> None:
        for listener in list(self._listeners):
            try:
                listener(counter)
            except Exception as exc:
                logger.warning(f"[VFS] Listener failed on refresh {counter}: {exc}", exc_info=True)

    # ── Reads ─────────────────────────────────────────────────────────────────

    def exists(self, path: str) -> bool:
        return self._tree.contains(normalize_path(path))

    def is_directory(self, path: str) -> bool:
        node = self._tree.get(normalize_path(path))
        return node is not None and node.type == NodeType.DIRECTORY

    def read_file(self, path: str) -> Optional[str]:
        """Content of the file at ``path``; None if absent or a directory."""
        node = self._tree.get(normalize_path(path))
        if node is None or node.type != NodeType.FILE:
            return None
        return node.content

    def get_node(self, path: str) -> Optional[FileNode]:
        node = self._tree.get(normalize_path(path))
        return node.model_copy(deep=True) if node is not None else None

    def list_entries(self, path: str = ROOT) -> list[FileNode]:
        """Immediate children of a directory, as copies, in sorted order."""
        path = normalize_path(path)
        with self._lock:
            node = self._require_directory(path)
            return [self._tree.get(child).model_copy(deep=True) for child in node.children]

    def list_directory(self, path: str = ROOT) -> FileView:
        """Files beneath ``path`` as a lazy ``(path, content)`` sequence.

        Raises:
            NotFound: if nothing exists at ``path``
            InvalidPath: if ``path`` is a file
        """
        path = normalize_path(path)
        self._require_directory(path)
        return FileView(self, path)

    def get_all_files(self) -> FileView:
        return FileView(self, ROOT)

    def snapshot(self) -> dict[str, str]:
        """Plain ``{path: content}`` copy of every file, in traversal order."""
        return dict(self.get_all_files())

    def _require_directory(self, path: str) -> FileNode:
        node = self._tree.get(path)
        if node is None:
            raise NotFound(f"Directory not found: {path}", path=path)
        if node.type != NodeType.DIRECTORY:
            raise InvalidPath(f"Not a directory: {path}", path=path)
        return node

    # ── Mutations ─────────────────────────────────────────────────────────────

    def create_file(self, path: str, content: str = "") -> FileNode:
        """Create a file, creating missing parent directories on the way.

        Raises:
            AlreadyExists: if any node already lives at ``path``
            InvalidPath: if an ancestor of ``path`` is a file
        """
        path = normalize_path(path)
        with self._lock:
            if self._tree.contains(path):
                raise AlreadyExists(f"File already exists: {path}", path=path)
            self._ensure_parents(path)
            node = FileNode(path=path, name=base_name(path), type=NodeType.FILE, content=content)
            self._tree.insert(node)
            counter = self._bump()
        logger.debug(f"[VFS] Created {path} ({len(content)} chars)")
        self._notify(counter)
        return node.model_copy(deep=True)

    def create_directory(self, path: str) -> FileNode:
        path = normalize_path(path)
        with self._lock:
            if self._tree.contains(path):
                raise AlreadyExists(f"Directory already exists: {path}", path=path)
            self._ensure_parents(path)
            self._tree.ensure_directories(path)
            counter = self._bump()
        self._notify(counter)
        return self.get_node(path)

    def update_file(self, path: str, content: str) -> None:
        """Overwrite the content of an existing file.

        Raises:
            NotFound: if no file lives at ``path`` (directories included)
        """
        path = normalize_path(path)
        with self._lock:
            node = self._tree.get(path)
            if node is None or node.type != NodeType.FILE:
                raise NotFound(f"File not found: {path}", path=path)
            node.content = content
            counter = self._bump()
        self._notify(counter)

    write_file = update_file

    def delete(self, path: str) -> None:
        """Delete a file, or a directory together with everything below it."""
        path = normalize_path(path)
        with self._lock:
            if path == ROOT:
                raise InvalidPath("The root directory cannot be deleted", path=path)
            if not self._tree.contains(path):
                raise NotFound(f"Path not found: {path}", path=path)
            doomed = self._tree.descendants(path, include_self=True)
            for current in reversed(doomed):
                self._tree.remove(current)
            counter = self._bump()
        logger.debug(f"[VFS] Deleted {path} ({len(doomed)} nodes)")
        self._notify(counter)

    def rename(self, old_path: str, new_path: str) -> None:
        """Move a node, re-keying every descendant of a directory.

        The move is staged on a copy of the node table and swapped in with a
        single assignment, so a failure leaves the tree exactly as it was.

        Raises:
            NotFound: if ``old_path`` does not exist
            AlreadyExists: if ``new_path`` already exists
            InvalidPath: for the root, or a directory moved into itself
        """
        old_path = normalize_path(old_path)
        new_path = normalize_path(new_path)
        with self._lock:
            if old_path == ROOT:
                raise InvalidPath("The root directory cannot be renamed", path=old_path)
            if not self._tree.contains(old_path):
                raise NotFound(f"Path not found: {old_path}", path=old_path)
            if self._tree.contains(new_path):
                raise AlreadyExists(f"Path already exists: {new_path}", path=new_path)
            if is_descendant(new_path, old_path):
                raise InvalidPath(f"Cannot move {old_path} into itself", path=new_path)

            current = self._tree.nodes()
            staged = dict(current)
            moved = self._tree.descendants(old_path, include_self=True)
            mapping = {p: new_path + p[len(old_path):] for p in moved}
            for p in moved:
                del staged[p]
            for p in moved:
                node = current[p]
                target = mapping[p]
                staged[target] = node.model_copy(update={
                    "path": target,
                    "name": base_name(target),
                    "children": sorted(mapping[c] for c in node.children),
                })
            _set_child(staged, parent_path(old_path), old_path, present=False)
            for directory in ancestors(new_path):
                existing = staged.get(directory)
                if existing is None:
                    staged[directory] = FileNode(
                        path=directory, name=base_name(directory), type=NodeType.DIRECTORY,
                    )
                    _set_child(staged, parent_path(directory), directory, present=True)
                elif existing.type != NodeType.DIRECTORY:
                    raise InvalidPath(f"Not a directory: {directory}", path=directory)
            _set_child(staged, parent_path(new_path), new_path, present=True)

            self._tree.replace_nodes(staged)
            counter = self._bump()
        logger.debug(f"[VFS] Renamed {old_path} → {new_path} ({len(moved)} nodes)")
        self._notify(counter)

    def _ensure_parents(self, path: str) -> None:
        try:
            self._tree.ensure_directories(parent_path(path))
        except KeyError as exc:
            raise InvalidPath(f"Cannot create {path}: {exc.args[0]}", path=path) from exc

    # ── Persistence ───────────────────────────────────────────────────────────

    def serialize(self) -> dict[str, dict[str, str]]:
        """Flat ``{path: {"type", "content"}}`` map of every node, root included."""
        with self._lock:
            return {
                path: {"type": self._tree.get(path).type.value, "content": self._tree.get(path).content}
                for path in self._tree
            }

    def deserialize_from_nodes(self, nodes: Mapping[str, Any]) -> None:
        """Replace the whole tree with the contents of a serialized node map.

        Hierarchy is rebuilt from the paths alone; missing intermediate
        directories are synthesized and key order does not matter.

        Raises:
            InvalidPath: if a path is used both as a file and as a directory,
                or a node has an unknown type or non-string content
        """
        entries = {}
        for path, raw in nodes.items():
            try:
                entries[normalize_path(path)] = SerializedNode.model_validate(raw)
            except ValidationError as exc:
                raise InvalidPath(f"Malformed node {path}: {_first_error(exc)}", path=path) from exc
        tree = PathTree()
        directories = sorted(p for p, e in entries.items() if e.type == NodeType.DIRECTORY)
        files = sorted(p for p, e in entries.items() if e.type == NodeType.FILE)
        try:
            for path in directories:
                tree.ensure_directories(path)
            for path in files:
                tree.ensure_directories(parent_path(path) or ROOT)
                tree.insert(FileNode(
                    path=path, name=base_name(path), type=NodeType.FILE,
                    content=entries[path].content,
                ))
        except KeyError as exc:
            raise InvalidPath(f"Inconsistent node map: {exc.args[0]}") from exc

        with self._lock:
            self._tree.replace_nodes(tree.nodes())
            counter = self._bump()
        logger.debug(f"[VFS] Restored {len(files)} files, {len(directories)} directories")
        self._notify(counter)

    def to_json(self) -> str:
        return json.dumps(self.serialize())

    @classmethod
    def from_nodes(cls, nodes: Mapping[str, Any]) -> "VirtualFileSystem":
        vfs = cls()
        vfs.deserialize_from_nodes(nodes)
        return vfs

    @classmethod
    def from_json(cls, payload: str) -> "VirtualFileSystem":
        return cls.from_nodes(json.loads(payload))

    @classmethod
    def from_files(cls, files: Iterable[tuple[str, str]] | Mapping[str, str]) -> "VirtualFileSystem":
        """Build a VFS from plain ``{path: content}`` pairs."""
        pairs = files.items() if isinstance(files, Mapping) else files
        return cls.from_nodes({path: {"type": "file", "content": content} for path, content in pairs})


def _set_child(staged: dict[str, FileNode], parent: str, child: str, present: bool) -> None:
    """Add or drop ``child`` in a staged parent, copying the parent first."""
    node = staged[parent]
    children = [c for c in node.children if c != child]
    if present:
        children.append(child)
    staged[parent] = node.model_copy(update={"children": sorted(children)})


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "node"
    return f"{field}: {err.get('msg', 'invalid')}"
