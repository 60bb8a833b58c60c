"""Orchestrates: lookup → execute → notify callbacks → capture result.

The single entry point the agent loop uses to run a tool call. Whatever
happens inside a tool, the caller gets a ``(result, error)`` pair back.
"""

import logging
from typing import Any, Optional, Tuple

from uigen.callbacks.base import UIGenCallback
from uigen.tools.registry import ToolRegistry
from uigen.vfs import VirtualFileSystem

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Runs tool calls against one project's registry."""

    def __init__(
        self,
        registry: ToolRegistry,
        vfs: Optional[VirtualFileSystem] = None,
        callbacks: Optional[list[UIGenCallback]] = None,
    ):
        """
        Args:
            registry: Tools bound to the project's VFS
            vfs: The same VFS; when present its refresh counter is reported to callbacks
            callbacks: Lifecycle observers awaited after every call
        """
        self.registry = registry
        self.vfs = vfs
        self.callbacks = list(callbacks or [])

    async def execute(self, tool_name: str, params: dict[str, Any]) -> Tuple[Any, Optional[str]]:
        """Execute one tool call.

        Command-level failures (missing file, invalid command, ...) are part of
        the tool's result, not of ``error``; ``error`` is only set when the
        tool could not run at all.

        Returns:
            Tuple of (result, error). error is None when the tool ran.
        """
        try:
            _definition, tool_fn = self.registry.get(tool_name)
        except Exception as exc:
            logger.warning(f"[Executor] Tool lookup failed for '{tool_name}': {exc}")
            return None, "Tool not found"

        try:
            result = await tool_fn(**params)
        except Exception as exc:
            logger.error(f"[Executor] Tool execution error for '{tool_name}': {exc}", exc_info=True)
            await self._emit_error(exc, {"tool": tool_name, "command": params.get("command", "")})
            return None, "Tool execution failed"

        counter = self.vfs.refresh_counter if self.vfs is not None else None
        for callback in self.callbacks:
            try:
                await callback.on_tool_execute(tool_name, params, result, refresh_counter=counter)
            except Exception as exc:
                logger.warning(f"[Executor] Callback failed after '{tool_name}': {exc}")
        return result, None

    async def _emit_error(self, error: Exception, context: dict[str, Any]) -> None:
        for callback in self.callbacks:
            try:
                await callback.on_error(error, context)
            except Exception as exc:
                logger.warning(f"[Executor] Error callback failed: {exc}")
