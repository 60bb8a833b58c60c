"""/v1/sessions — Project sessions: files, tool calls and previews."""

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import HTMLResponse

from uigen.api.schemas import (
    CreateSessionRequest, FilesResponse, ReplaceFilesRequest, SessionResponse, ToolCallResponse,
)
from uigen.api.store import Workspace
from uigen.exceptions import InvalidPath, NotFound
from uigen.types import PreviewResult

router = APIRouter(tags=["sessions"])


def _workspace(request: Request, session_id: str) -> Workspace:
    try:
        return request.app.state.sessions.get(session_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))


async def _audit_mutation(request: Request, workspace: Workspace, source: str, before: int) -> None:
    after = workspace.vfs.refresh_counter
    if after == before:
        return
    await request.app.state.audit("vfs_mutation", {
        "session_id": workspace.id, "source": source, "refresh_counter": after,
    })


@router.post("/sessions", response_model=SessionResponse)
async def create_session(request: Request, body: Optional[CreateSessionRequest] = None):
    """Start a session, optionally from a serialized node map."""
    nodes = body.nodes if body else None
    try:
        workspace = request.app.state.sessions.create(nodes)
    except InvalidPath as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return SessionResponse(session_id=workspace.id, refresh_counter=workspace.vfs.refresh_counter)


@router.get("/sessions/{session_id}/files", response_model=FilesResponse)
async def get_files(request: Request, session_id: str):
    """Serialized node map of the session's VFS."""
    workspace = _workspace(request, session_id)
    return FilesResponse(
        session_id=workspace.id,
        refresh_counter=workspace.vfs.refresh_counter,
        nodes=workspace.vfs.serialize(),
    )


@router.put("/sessions/{session_id}/files", response_model=FilesResponse)
async def replace_files(request: Request, session_id: str, body: ReplaceFilesRequest):
    """Replace the whole VFS with a serialized node map."""
    workspace = _workspace(request, session_id)
    before = workspace.vfs.refresh_counter
    try:
        workspace.vfs.deserialize_from_nodes(body.nodes)
    except InvalidPath as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    await _audit_mutation(request, workspace, "replace", before)
    return FilesResponse(
        session_id=workspace.id,
        refresh_counter=workspace.vfs.refresh_counter,
        nodes=workspace.vfs.serialize(),
    )


@router.post("/sessions/{session_id}/tools/{tool_name}", response_model=ToolCallResponse)
async def call_tool(
    request: Request,
    session_id: str,
    tool_name: str,
    params: Optional[dict[str, Any]] = Body(default=None),
):
    """Run one tool call against the session's VFS."""
    workspace = _workspace(request, session_id)
    if tool_name not in {t.name for t in workspace.tools.list_tools()}:
        raise HTTPException(status_code=404, detail=f"Tool not found: {tool_name}")

    before = workspace.vfs.refresh_counter
    result, error = await workspace.executor.execute(tool_name, params or {})
    await _audit_mutation(request, workspace, tool_name, before)
    return ToolCallResponse(result=result, error=error, refresh_counter=workspace.vfs.refresh_counter)


async def _refreshed(workspace: Workspace, dark: Optional[bool]) -> PreviewResult:
    if dark is not None:
        workspace.preview.theme.set(dark)
    return await workspace.preview.refresh_async()


@router.get("/sessions/{session_id}/preview", response_model=PreviewResult)
async def get_preview(request: Request, session_id: str, dark: Optional[bool] = None):
    """Build the preview and return it with its state and diagnostics."""
    workspace = _workspace(request, session_id)
    return await _refreshed(workspace, dark)


@router.get("/sessions/{session_id}/preview.html", response_class=HTMLResponse)
async def get_preview_html(request: Request, session_id: str, dark: Optional[bool] = None):
    """Build the preview and return the document itself."""
    workspace = _workspace(request, session_id)
    result = await _refreshed(workspace, dark)
    return HTMLResponse(content=result.html or "")


@router.delete("/sessions/{session_id}")
async def delete_session(request: Request, session_id: str):
    """Drop a session and release its preview modules."""
    try:
        request.app.state.sessions.delete(session_id)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return {"deleted": session_id}
