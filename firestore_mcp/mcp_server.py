"""
MCP server for Cloud Firestore.

Exposes the tools in tools.TOOLS over MCP. Every tool call resolves its
project from the optional `project` argument (default: the first project that
initialized) and answers with one text block of pretty-printed JSON; errors
use the same envelope.
"""

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

from .prompts import load_prompts
from .registry import ProjectRegistry
from .timestamps import to_json
from .tools import TOOLS, dispatch

logger = logging.getLogger(__name__)

SERVER_NAME = "firestore"
SERVER_VERSION = "1.0.0"


def _text(data: Any) -> list[types.TextContent]:
    return [types.TextContent(type="text", text=to_json(data))]


def create_mcp_server(registry: ProjectRegistry) -> Server:
    app = Server(SERVER_NAME, version=SERVER_VERSION)

    @app.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=name, description=tool.description, inputSchema=tool.input_schema)
            for name, tool in TOOLS.items()
        ]

    # Arguments are validated in dispatch()
    @app.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.ContentBlock]:
        try:
            return _text(await dispatch(registry, name, arguments))
        except Exception as e:
            logger.error(f"MCP tool '{name}' failed: {e}")
            return _text({"error": "Internal server error", "message": str(e)})

    @app.list_resources()
    async def list_resources() -> list[types.Resource]:
        return []

    @app.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return await load_prompts(registry)

    return app


def create_mcp_session_manager(registry: ProjectRegistry) -> StreamableHTTPSessionManager:
    """Create a stateless MCP session manager."""
    return StreamableHTTPSessionManager(
        app=create_mcp_server(registry),
        event_store=None,
        json_response=False,
        stateless=True,
    )
