"""
Elasticsearch security MCP server using FastMCP.

Tools run over the stdio transport. When ``PORT`` is set, an HTTP health
endpoint is served alongside for container platforms.
"""

import asyncio
from typing import Optional

from aiohttp import web
from fastmcp import FastMCP

from . import __version__
from .config import config
from .context import ServerContext, get_context, set_context, reset_context
from .errors import ProviderError
from .http_client import get_http_pool
from .logging import ProviderLogger
from .tools import register_all_tools

# Create FastMCP server instance
mcp = FastMCP("essecurity", version=__version__)

# Register all tools with the FastMCP server
register_all_tools(mcp)

# Module-level logger
logger = ProviderLogger()


def create_server(
    url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> "EssecurityMCPServer":
    """Create and return a configured EssecurityMCPServer instance."""
    return EssecurityMCPServer(
        url or config.ES_URL,
        username if username is not None else config.ES_USERNAME,
        password if password is not None else config.ES_PASSWORD,
    )


class EssecurityMCPServer:
    """Wrapper around the FastMCP server that owns the connection context."""

    def __init__(
        self,
        url: str = "http://localhost:9200",
        username: Optional[str] = None,
        password: Optional[str] = None,
        log_dir: Optional[str] = None,
    ):
        ctx = ServerContext(
            url=url,
            username=username,
            password=password,
            log_dir=log_dir or config.LOG_DIR,
        )
        set_context(ctx)
        self.logger = ctx.logger

    @property
    def url(self) -> str:
        """Get the current Elasticsearch URL."""
        return get_context().url

    def update_connection(
        self,
        url: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        get_context().update_connection(url, username, password)

    async def _create_health_check_app(self) -> web.Application:
        """Create HTTP health check application."""
        app = web.Application()

        async def health_check(request: web.Request) -> web.Response:
            ctx = get_context()
            try:
                # The client call blocks; keep the event loop free
                is_healthy = await asyncio.to_thread(ctx.es_client.health_check)
            except ProviderError as e:
                logger.error("Health check failed", error=e.message, kind=e.kind)
                return web.json_response(
                    {"status": "error", "service": "essecurity", "error": str(e)},
                    status=503,
                )
            if is_healthy:
                return web.json_response(
                    {"status": "healthy", "service": "essecurity"}, status=200
                )
            return web.json_response(
                {
                    "status": "degraded",
                    "service": "essecurity",
                    "reason": "elasticsearch_unavailable",
                },
                status=503,
            )

        app.router.add_get("/", health_check)
        app.router.add_get("/health", health_check)
        app.router.add_get("/ready", health_check)
        return app

    async def run(self) -> None:
        """Run the MCP server, with an HTTP health check when PORT is set."""
        if config.PORT is None:
            await self._run_mcp_server()
            return

        app = await self._create_health_check_app()
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "0.0.0.0", config.PORT)
        await site.start()
        logger.info(f"HTTP health check server started on port {config.PORT}")

        try:
            await self._run_mcp_server()
        finally:
            await runner.cleanup()

    async def _run_mcp_server(self) -> None:
        """Run the MCP server on stdio using FastMCP."""
        logger.info("Starting Elasticsearch security MCP server...")
        await mcp.run_async(transport="stdio")

    def cleanup(self) -> None:
        """Clean shutdown."""
        reset_context()
        get_http_pool().close_all()


def main() -> None:
    """Main entry point."""
    errors = config.validate()
    for error in errors:
        logger.warning(f"Configuration problem: {error}")

    server = create_server()
    try:
        asyncio.run(server.run())
    finally:
        server.cleanup()


if __name__ == "__main__":
    main()
