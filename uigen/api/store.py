"""In-memory session store: one VFS, tool set and preview per session id."""

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from uigen.callbacks.base import UIGenCallback
from uigen.config import UIGenConfig, config as _default_config
from uigen.exceptions import NotFound
from uigen.preview.resources import ResourceHandle
from uigen.preview.session import PreviewSession
from uigen.tools.executor import ToolExecutor
from uigen.tools.registry import ToolRegistry, build_tool_registry
from uigen.vfs.filesystem import VirtualFileSystem

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    id: str
    vfs: VirtualFileSystem
    tools: ToolRegistry
    executor: ToolExecutor
    preview: PreviewSession


class SessionStore:
    """Holds at most ``config.max_sessions`` workspaces; the oldest is evicted first."""

    def __init__(
        self,
        config: Optional[UIGenConfig] = None,
        callbacks: Optional[list[UIGenCallback]] = None,
    ):
        self.config = config or _default_config
        self.callbacks = list(callbacks or [])
        self._workspaces: "OrderedDict[str, Workspace]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._workspaces)

    def create(self, nodes: Optional[Mapping[str, Any]] = None) -> Workspace:
        """Start a workspace, optionally restored from a serialized node map.

        Raises:
            InvalidPath: if ``nodes`` is inconsistent
        """
        vfs = VirtualFileSystem.from_nodes(nodes) if nodes else VirtualFileSystem()
        tools = build_tool_registry(vfs)
        workspace = Workspace(
            id=uuid.uuid4().hex,
            vfs=vfs,
            tools=tools,
            executor=ToolExecutor(tools, vfs=vfs, callbacks=self.callbacks),
            preview=PreviewSession(vfs, config=self.config, callbacks=self.callbacks),
        )
        workspace.preview.attach()

        with self._lock:
            self._workspaces[workspace.id] = workspace
            while len(self._workspaces) > self.config.max_sessions:
                _, evicted = self._workspaces.popitem(last=False)
                self._close(evicted)
                logger.info(f"[Sessions] Evicted session {evicted.id}")
        logger.info(f"[Sessions] Created session {workspace.id}")
        return workspace

    def get(self, session_id: str) -> Workspace:
        """Raises NotFound for unknown or deleted sessions."""
        workspace = self._workspaces.get(session_id)
        if workspace is None:
            raise NotFound(f"Session not found: {session_id}", path=session_id)
        return workspace

    def delete(self, session_id: str) -> None:
        with self._lock:
            workspace = self._workspaces.pop(session_id, None)
        if workspace is None:
            raise NotFound(f"Session not found: {session_id}", path=session_id)
        self._close(workspace)
        logger.info(f"[Sessions] Deleted session {session_id}")

    def find_handle(self, handle_id: str) -> Optional[ResourceHandle]:
        """Look up a live module handle across every session."""
        for workspace in list(self._workspaces.values()):
            handle = workspace.preview.registry.get(handle_id)
            if handle is not None:
                return handle
        return None

    def clear(self) -> None:
        with self._lock:
            workspaces = list(self._workspaces.values())
            self._workspaces.clear()
        for workspace in workspaces:
            self._close(workspace)

    @staticmethod
    def _close(workspace: Workspace) -> None:
        workspace.preview.detach()
        workspace.preview.registry.release_all()
