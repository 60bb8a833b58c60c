"""Base callback protocol for UIGen lifecycle hooks.

Callbacks are called at key points: after each tool call, after each preview
build, and when something unexpected fails. Implement this protocol to observe
or instrument UIGen without modifying core logic.

Usage:
    class MyCallback(BaseCallback):
        async def on_tool_execute(self, tool_name, tool_params, result, **kw):
            print(f"{tool_name}: {result}")

    executor = ToolExecutor(registry, callbacks=[MyCallback()])
"""

from typing import Any, Protocol, runtime_checkable

from uigen.types import PreviewResult


@runtime_checkable
class UIGenCallback(Protocol):
    """Protocol defining hooks for UIGen lifecycle events.

    All methods are async; callers await each registered callback in order.
    """

    async def on_tool_execute(
        self,
        tool_name: str,
        tool_params: dict[str, Any],
        result: Any,
        **kwargs: Any,
    ) -> None:
        """Called after a tool runs, whether the command succeeded or failed."""
        ...

    async def on_preview_built(
        self,
        result: PreviewResult,
        **kwargs: Any,
    ) -> None:
        """Called when a preview generation is committed."""
        ...

    async def on_error(
        self,
        error: Exception,
        context: dict[str, Any],
        **kwargs: Any,
    ) -> None:
        """Called when an unexpected exception is caught at a boundary."""
        ...


class BaseCallback:
    """Concrete base with no-op implementations of all hooks.

    Subclass this instead of implementing the Protocol directly
    to avoid implementing every method.
    """

    async def on_tool_execute(
        self,
        tool_name: str,
        tool_params: dict[str, Any],
        result: Any,
        **kwargs: Any,
    ) -> None:
        pass

    async def on_preview_built(self, result: PreviewResult, **kwargs: Any) -> None:
        pass

    async def on_error(
        self, error: Exception, context: dict[str, Any], **kwargs: Any
    ) -> None:
        pass
