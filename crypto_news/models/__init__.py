"""Data models for crypto_news."""

from .schemas import Article, FeedState, FeedStatus, NewsCategory

__all__ = ["Article", "FeedState", "FeedStatus", "NewsCategory"]
