"""GET /v1/modules/{handle_id}.js — Served preview modules."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

router = APIRouter(tags=["modules"])


@router.get("/modules/{handle_id}.js")
async def get_module(request: Request, handle_id: str):
    """Module text of a live handle; released handles are gone."""
    handle = request.app.state.sessions.find_handle(handle_id)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"Module not found: {handle_id}")
    return Response(
        content=handle.content,
        media_type="text/javascript",
        # module scripts are fetched in CORS mode from the preview frame
        headers={"Cache-Control": "no-store", "Access-Control-Allow-Origin": "*"},
    )
