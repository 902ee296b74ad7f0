"""Services for crypto_news."""

from .article_parser import parse_article, parse_published_at, relative_time
from .feed_controller import FeedController, BOOKMARKS_KEY, LATEST_LIMIT, NO_NEWS_MESSAGE
from .news_client import NewsClient

__all__ = [
    "parse_article",
    "parse_published_at",
    "relative_time",
    "FeedController",
    "BOOKMARKS_KEY",
    "LATEST_LIMIT",
    "NO_NEWS_MESSAGE",
    "NewsClient",
]
