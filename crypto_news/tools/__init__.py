"""MCP tools for crypto_news."""

from .news_tools import create_news_tools, feed_snapshot, article_to_dict

__all__ = ["create_news_tools", "feed_snapshot", "article_to_dict"]
