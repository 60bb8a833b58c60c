"""Tests for tool registry, executor and callback notification."""

import pytest

from uigen.callbacks.base import BaseCallback
from uigen.exceptions import ToolError
from uigen.tools.executor import ToolExecutor
from uigen.tools.registry import ToolRegistry, build_tool_registry
from uigen.types import RiskLevel, ToolDefinition


# ── Helpers ───────────────────────────────────────────────────────────────────

def _make_tool_def(name: str = "echo") -> ToolDefinition:
    return ToolDefinition(
        name=name,
        description="Echo things",
        parameters={"type": "object", "properties": {"text": {"type": "string"}}},
        risk_level=RiskLevel.LOW,
        mutates=False,
    )


async def _echo(text: str = "") -> str:
    return f"echo: {text}"


async def _boom(**params) -> str:
    raise RuntimeError("kaboom")


class _Recorder(BaseCallback):
    def __init__(self):
        self.calls = []
        self.errors = []

    async def on_tool_execute(self, tool_name, tool_params, result, **kwargs):
        self.calls.append((tool_name, tool_params, result, kwargs.get("refresh_counter")))

    async def on_error(self, error, context, **kwargs):
        self.errors.append((error, context))


# ── TestToolRegistry ──────────────────────────────────────────────────────────

class TestToolRegistry:

    def test_register_and_retrieve(self):
        registry = ToolRegistry()
        registry.register(_make_tool_def(), _echo)
        definition, fn = registry.get("echo")
        assert definition.name == "echo"
        assert fn is _echo

    def test_unknown_tool_raises(self):
        with pytest.raises(ToolError) as exc_info:
            ToolRegistry().get("does_not_exist")
        assert exc_info.value.tool_name == "does_not_exist"

    def test_builtin_tools(self, tool_registry):
        names = {t.name for t in tool_registry.list_tools()}
        assert names == {"str_replace_editor", "file_manager"}

    def test_schema_for_llm(self, tool_registry):
        schema = tool_registry.get_schema_for_llm()
        by_name = {entry["function"]["name"]: entry for entry in schema}
        editor = by_name["str_replace_editor"]["function"]
        assert editor["parameters"]["required"] == ["command", "path"]
        assert "undo_edit" in editor["parameters"]["properties"]["command"]["enum"]
        assert all(entry["type"] == "function" for entry in schema)


# ── TestToolExecutor ──────────────────────────────────────────────────────────

class TestToolExecutor:

    @pytest.mark.asyncio
    async def test_runs_tool(self):
        registry = ToolRegistry()
        registry.register(_make_tool_def(), _echo)
        result, error = await ToolExecutor(registry).execute("echo", {"text": "hi"})
        assert (result, error) == ("echo: hi", None)

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result, error = await ToolExecutor(ToolRegistry()).execute("nope", {})
        assert result is None
        assert error == "Tool not found"

    @pytest.mark.asyncio
    async def test_exception_becomes_error_and_is_reported(self):
        registry = ToolRegistry()
        registry.register(_make_tool_def("boom"), _boom)
        recorder = _Recorder()
        result, error = await ToolExecutor(registry, callbacks=[recorder]).execute("boom", {"command": "x"})
        assert result is None
        assert error == "Tool execution failed"
        assert isinstance(recorder.errors[0][0], RuntimeError)
        assert recorder.errors[0][1]["tool"] == "boom"

    @pytest.mark.asyncio
    async def test_callbacks_see_refresh_counter(self, project_vfs):
        recorder = _Recorder()
        executor = ToolExecutor(build_tool_registry(project_vfs), vfs=project_vfs, callbacks=[recorder])
        before = project_vfs.refresh_counter
        result, error = await executor.execute(
            "str_replace_editor", {"command": "create", "path": "/New.jsx", "file_text": "x"},
        )
        assert error is None
        assert result == "File created: /New.jsx"
        tool_name, params, seen_result, counter = recorder.calls[0]
        assert tool_name == "str_replace_editor"
        assert counter == before + 1

    @pytest.mark.asyncio
    async def test_command_failures_are_results_not_errors(self, project_vfs):
        executor = ToolExecutor(build_tool_registry(project_vfs), vfs=project_vfs)
        result, error = await executor.execute("file_manager", {"command": "delete", "path": "/ghost"})
        assert error is None
        assert result == {"success": False, "error": "Failed to delete /ghost"}

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_fail_the_call(self):
        class _Broken(BaseCallback):
            async def on_tool_execute(self, *args, **kwargs):
                raise RuntimeError("observer bug")

        registry = ToolRegistry()
        registry.register(_make_tool_def(), _echo)
        result, error = await ToolExecutor(registry, callbacks=[_Broken()]).execute("echo", {"text": "x"})
        assert error is None
        assert result == "echo: x"
