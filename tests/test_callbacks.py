"""Tests for the callback protocol and the structured audit logger."""

import json
import logging

import pytest

from uigen.callbacks import BaseCallback, LoggingCallback, UIGenCallback
from uigen.types import PreviewResult, PreviewState


def _events(caplog) -> list[dict]:
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == "uigen.audit"]


class TestProtocol:

    def test_base_callback_satisfies_protocol(self):
        assert isinstance(BaseCallback(), UIGenCallback)
        assert isinstance(LoggingCallback(), UIGenCallback)


class TestLoggingCallback:

    @pytest.mark.asyncio
    async def test_tool_execute_line(self, caplog):
        caplog.set_level(logging.INFO, logger="uigen.audit")
        await LoggingCallback().on_tool_execute(
            "str_replace_editor",
            {"command": "create", "path": "/App.jsx", "file_text": "secret source"},
            "File created: /App.jsx",
            refresh_counter=3,
        )
        (event,) = _events(caplog)
        assert event["event"] == "tool_execute"
        assert event["command"] == "create"
        assert event["ok"] is True
        assert event["refresh_counter"] == 3
        assert "secret source" not in json.dumps(event)

    @pytest.mark.asyncio
    async def test_failed_results_are_not_ok(self, caplog):
        caplog.set_level(logging.INFO, logger="uigen.audit")
        callback = LoggingCallback()
        await callback.on_tool_execute("str_replace_editor", {}, "Error: File not found: /x")
        await callback.on_tool_execute("file_manager", {}, {"success": False, "error": "Invalid command"})
        assert [e["ok"] for e in _events(caplog)] == [False, False]

    @pytest.mark.asyncio
    async def test_preview_built_line(self, caplog):
        caplog.set_level(logging.INFO, logger="uigen.audit")
        result = PreviewResult(state=PreviewState.READY, entry_point="/App.jsx", generation=7)
        await LoggingCallback().on_preview_built(result)
        (event,) = _events(caplog)
        assert event == {**event, "event": "preview_built", "state": "ready", "generation": 7}

    @pytest.mark.asyncio
    async def test_error_line_is_error_level(self, caplog):
        caplog.set_level(logging.INFO, logger="uigen.audit")
        await LoggingCallback().on_error(ValueError("bad"), {"tool": "x"})
        record = [r for r in caplog.records if r.name == "uigen.audit"][0]
        assert record.levelno == logging.ERROR
        assert json.loads(record.getMessage())["error_type"] == "ValueError"

    @pytest.mark.asyncio
    async def test_ad_hoc_event(self, caplog):
        caplog.set_level(logging.INFO, logger="uigen.audit")
        await LoggingCallback()("vfs_mutation", {"session_id": "abc", "refresh_counter": 2})
        (event,) = _events(caplog)
        assert event["event"] == "vfs_mutation"
        assert event["refresh_counter"] == 2
