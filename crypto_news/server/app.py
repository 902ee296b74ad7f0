"""crypto_news - MCP Server

This module implements the MCP server using FastMCP with multi-transport support
(STDIO, SSE, and Streamable HTTP). One FeedController backs every tool.
"""

import asyncio
import os
import sys
from typing import Optional

import click
from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from crypto_news.config import ServerConfig, get_config
from crypto_news.logging_config import setup_logging, logger
from crypto_news.services.feed_controller import FeedController
from crypto_news.services.news_client import NewsClient
from crypto_news.storage import database
from crypto_news.tools.news_tools import create_news_tools


def build_controller(config: ServerConfig) -> FeedController:
    """Create a feed controller wired to the news API and preference store."""
    client = NewsClient.from_config(config)
    return FeedController(fetch_page=client.fetch_page, store=database.PreferenceStore())


def create_mcp_server(
    config: Optional[ServerConfig] = None,
    controller: Optional[FeedController] = None,
) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        config: Optional server configuration
        controller: Optional feed controller (built from config if omitted)

    Returns:
        Configured FastMCP server instance
    """
    if config is None:
        config = get_config()

    setup_logging(config)
    logger.info(f"Server config: {config.name} at log level {config.log_level}")

    if not config.news_api_key:
        logger.warning("NEWS_API_KEY is not set; the news service will likely reject requests")

    if controller is None:
        controller = build_controller(config)

    # Configure DNS rebinding protection (disabled by default for development)
    dns_protection = os.getenv("MCP_DNS_REBINDING_PROTECTION", "false").lower() == "true"
    allowed_hosts_env = os.getenv("MCP_ALLOWED_HOSTS", "")
    allowed_hosts = [h.strip() for h in allowed_hosts_env.split(",") if h.strip()] if allowed_hosts_env else []

    logger.info(f"DNS rebinding protection: {'enabled' if dns_protection else 'disabled'}")

    mcp_server = FastMCP(
        config.name or "crypto_news",
        transport_security=TransportSecuritySettings(
            enable_dns_rebinding_protection=dns_protection,
            allowed_hosts=allowed_hosts
        )
    )

    register_tools(mcp_server, controller)

    logger.info("Server initialization complete")
    return mcp_server


def register_tools(mcp_server: FastMCP, controller: FeedController) -> None:
    """Register all news tools for a controller with the server."""
    for tool_func in create_news_tools(controller):
        tool_name = tool_func.__name__
        mcp_server.tool(name=tool_name)(tool_func)
        logger.info(f"Registered news tool: {tool_name}")

    logger.info(f"Server '{mcp_server.name}' initialized")


async def start_session(controller: FeedController) -> None:
    """Restore bookmarks and load the first page of news."""
    await controller.load_bookmarks()
    await controller.load_all()

    if controller.error_message:
        logger.warning(f"Initial news load failed: {controller.error_message}")
    else:
        logger.info(f"Loaded {len(controller.articles)} articles")


@click.command()
@click.option(
    "--port",
    default=3001,
    help="Port to listen on for SSE or Streamable HTTP transport"
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host to bind to (use 0.0.0.0 for Docker)"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="Transport type (stdio, sse, or streamable-http)"
)
def main(port: int, host: str, transport: str) -> int:
    """Run the crypto_news server with specified transport."""
    config = get_config()
    controller = build_controller(config)
    server = create_mcp_server(config, controller)

    async def run_server():
        """Inner async function to run the server and manage the event loop."""
        try:
            await start_session(controller)

            if transport == "stdio":
                logger.info("Starting server with STDIO transport")
                await server.run_stdio_async()
            elif transport == "sse":
                logger.info(f"Starting server with SSE transport on {host}:{port}")
                server.settings.host = host
                server.settings.port = port
                await server.run_sse_async()
            elif transport == "streamable-http":
                logger.info(f"Starting server with Streamable HTTP transport on {host}:{port}")
                server.settings.host = host
                server.settings.port = port
                server.settings.streamable_http_path = "/mcp"
                await server.run_streamable_http_async()
            else:
                raise ValueError(f"Unknown transport: {transport}")
        finally:
            await database.close_database()

    try:
        asyncio.run(run_server())
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
