"""crypto_news - cryptocurrency news feed state and MCP tools."""

__version__ = "0.1.0"
