"""GET /v1/health — Liveness plus session count."""

from fastapi import APIRouter, Request
from uigen.api.schemas import HealthResponse
from uigen.version import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Report service status."""
    return HealthResponse(status="ok", version=__version__, sessions=len(request.app.state.sessions))
