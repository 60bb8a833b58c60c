"""GET /v1/tools — Editing tool definitions."""

from fastapi import APIRouter, Request
from uigen.api.schemas import ToolResponse

router = APIRouter(tags=["tools"])


@router.get("/tools")
async def list_tools(request: Request):
    """List the tools every session exposes, with their JSON schemas."""
    tool_registry = request.app.state.tool_registry
    tools = tool_registry.list_tools()
    return {
        "tools": [
            ToolResponse(
                name=t.name,
                description=t.description,
                risk_level=t.risk_level.value if hasattr(t.risk_level, "value") else t.risk_level,
                mutates=t.mutates,
                parameters=t.parameters,
            )
            for t in tools
        ]
    }
