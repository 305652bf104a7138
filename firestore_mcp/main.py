import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from .mcp_server import SERVER_VERSION, create_mcp_session_manager
from .registry import ProjectRegistry

logger = logging.getLogger(__name__)


def create_app(registry: ProjectRegistry) -> FastAPI:
    """HTTP transport: MCP Streamable HTTP at /mcp plus a health check."""
    mcp_session_manager = create_mcp_session_manager(registry)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with mcp_session_manager.run():
            logger.info("Firestore MCP server running on streamable HTTP")
            yield

    app = FastAPI(
        title="Firestore MCP",
        description="Model Context Protocol interface for Google Cloud Firestore",
        version=SERVER_VERSION,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def no_cache(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
        return response

    # Mounted as a raw ASGI sub-application at /mcp
    async def mcp_asgi_handler(scope, receive, send):
        await mcp_session_manager.handle_request(scope, receive, send)

    app.mount("/mcp", app=mcp_asgi_handler)

    @app.get("/health")
    async def get_health():
        return {
            "status": "ok",
            "projects": registry.project_ids,
            "defaultProject": registry.default_project,
        }

    return app
