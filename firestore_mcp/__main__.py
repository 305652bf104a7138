"""
Entry point: python -m firestore_mcp

FIRESTORE_MCP_TRANSPORT selects "stdio" (default) or "http". Logs go to
stderr; stdout belongs to the stdio MCP stream.
"""

import asyncio
import logging
import sys

from .config import Settings, load_settings
from .registry import ProjectRegistry, RegistryError, load_registry

logger = logging.getLogger("firestore_mcp")


async def run_stdio(registry: ProjectRegistry) -> None:
    from mcp.server.stdio import stdio_server

    from .mcp_server import create_mcp_server

    app = create_mcp_server(registry)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Firestore MCP server running on stdio")
        await app.run(read_stream, write_stream, app.create_initialization_options())


def run_http(registry: ProjectRegistry, settings: Settings) -> None:
    import uvicorn

    from .main import create_app

    uvicorn.run(create_app(registry), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def main() -> int:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        registry = load_registry(settings)
    except RegistryError as e:
        logger.error(f"Error: {e}. Exiting.")
        return 1

    try:
        if settings.transport == "http":
            run_http(registry, settings)
        else:
            asyncio.run(run_stdio(registry))
    except Exception as e:
        logger.error(f"Error during startup: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
