"""FastAPI application factory with lifespan management."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from uigen.config import config
from uigen.logging_setup import configure_logging
from uigen.version import __version__


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        # preview documents are meant to be framed by the host page
        if not request.url.path.endswith("/preview.html"):
            response.headers["X-Frame-Options"] = "DENY"
        return response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    # ── Startup ──
    configure_logging(config.log_level)
    logger.info(
        f"UIGen v{__version__} ready — {len(app.state.tool_registry.list_tools())} tools, "
        f"module URLs: {config.preview_module_base_url or 'inline data:'}"
    )

    yield

    # ── Shutdown ──
    logger.info("UIGen shutting down...")
    app.state.sessions.clear()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="UIGen",
        description="Virtual file system, editing tools and live preview for generated React components.",
        version=__version__,
        lifespan=lifespan,
    )

    # Shared state: sessions, the audit callback, and the tool catalog
    from uigen.api.store import SessionStore
    from uigen.callbacks.logging import LoggingCallback
    from uigen.tools.registry import build_tool_registry
    from uigen.vfs import VirtualFileSystem

    audit = LoggingCallback()
    app.state.audit = audit
    app.state.sessions = SessionStore(config, callbacks=[audit])
    app.state.tool_registry = build_tool_registry(VirtualFileSystem())

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Security headers: outermost middleware, applied to all responses
    app.add_middleware(SecurityHeadersMiddleware)

    # Routes
    from uigen.api.routes import health, modules, sessions, tools
    app.include_router(health.router, prefix="/v1")
    app.include_router(tools.router, prefix="/v1")
    app.include_router(sessions.router, prefix="/v1")
    app.include_router(modules.router, prefix="/v1")

    return app


app = create_app()
