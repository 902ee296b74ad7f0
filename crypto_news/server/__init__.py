"""MCP server package initialization"""

from crypto_news.server.app import create_mcp_server, build_controller

__all__ = ["create_mcp_server", "build_controller"]
