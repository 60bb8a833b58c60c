"""Structured JSON logging callback for UIGen lifecycle events."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from uigen.callbacks.base import BaseCallback
from uigen.types import PreviewResult

logger = logging.getLogger("uigen.audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class LoggingCallback(BaseCallback):
    """Emits structured JSON log lines for every lifecycle event.

    Each log line is a self-contained JSON object with:
      - event: event type name
      - ts: ISO-8601 UTC timestamp
      - relevant fields depending on event

    Log level: INFO for normal events, ERROR for errors.
    Logger name: uigen.audit (configure in your logging setup)

    Besides the named hooks, an instance is a plain ``async (event, data)``
    callable, so VFS mutation events can be forwarded to it directly.
    """

    async def __call__(self, event: str, data: dict) -> None:
        """Log an ad-hoc event (e.g. ``vfs_mutation``) with flattened fields."""
        logger.info(json.dumps({"event": event, "ts": _now(), **{
            k: (str(v)[:200] if not isinstance(v, (int, float, bool)) else v)
            for k, v in data.items()
        }}))

    async def on_tool_execute(
        self,
        tool_name: str,
        tool_params: dict[str, Any],
        result: Any,
        **kwargs: Any,
    ) -> None:
        logger.info(json.dumps({
            "event": "tool_execute",
            "ts": _now(),
            "tool": tool_name,
            "command": tool_params.get("command", ""),
            "path": tool_params.get("path", ""),
            "param_keys": list(tool_params.keys()),
            "ok": _succeeded(result),
            "refresh_counter": kwargs.get("refresh_counter"),
        }))

    async def on_preview_built(self, result: PreviewResult, **kwargs: Any) -> None:
        logger.info(json.dumps({
            "event": "preview_built",
            "ts": _now(),
            "state": result.state.value,
            "generation": result.generation,
            "entry_point": result.entry_point,
            "error_count": len(result.errors),
        }))

    async def on_error(
        self, error: Exception, context: dict[str, Any], **kwargs: Any
    ) -> None:
        logger.error(json.dumps({
            "event": "error",
            "ts": _now(),
            "error_type": type(error).__name__,
            "error": str(error),
            "context": {k: str(v)[:200] for k, v in context.items()},
        }))


def _succeeded(result: Any) -> bool:
    if isinstance(result, dict):
        return bool(result.get("success"))
    if isinstance(result, str):
        return not result.startswith("Error") and "not found" not in result
    return result is not None
