"""Crypto news MCP tools.

This module provides MCP tools for browsing a news feed held by a
FeedController: loading pages, switching categories, and tracking read and
bookmarked articles.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from mcp.server.fastmcp import Context

from crypto_news.logging_config import get_logger
from crypto_news.models.schemas import Article, NewsCategory
from crypto_news.services.feed_controller import FeedController


def article_to_dict(
    controller: FeedController,
    article: Article,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Serialize an article with its display and membership state."""
    return {
        "id": article.id,
        "title": article.title,
        "description": article.description,
        "url": article.url,
        "image_url": article.image_url,
        "source_name": article.source_name,
        "published_at": article.published_at.isoformat(),
        "relative_time": controller.relative_time(article, now),
        "is_read": controller.is_read(article),
        "is_bookmarked": controller.is_bookmarked(article),
    }


def feed_snapshot(controller: FeedController, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Serialize the feed state exposed to clients."""
    return {
        "category": controller.category.value,
        "status": controller.status.value,
        "page": controller.page,
        "is_loading_initial": controller.is_loading_initial,
        "is_loading_more": controller.is_loading_more,
        "error_message": controller.error_message,
        "count": len(controller.articles),
        "articles": [article_to_dict(controller, a, now) for a in controller.articles],
    }


def create_news_tools(controller: FeedController) -> List[Callable]:
    """Build the MCP tool functions bound to one feed controller.

    Args:
        controller: Feed session the tools operate on

    Returns:
        List of async tool functions ready for registration
    """

    async def select_category(category: str, ctx: Context = None) -> Dict[str, Any]:
        """Switch the news category and reload the feed from the first page.

        Args:
            category: Category name: "All", "Bitcoin" or "Ethereum" (case-insensitive)
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - feed state: category, status, page, loading flags, error_message, articles
            - error: string if the category is unknown
        """
        logger = get_logger(__name__)
        logger.info(f"select_category called: category={category}")

        try:
            selected = NewsCategory.from_name(category)
        except ValueError as e:
            return {
                "success": False,
                "error": str(e),
            }

        await controller.select_category(selected)
        return {"success": True, **feed_snapshot(controller)}

    async def load_all(ctx: Context = None) -> Dict[str, Any]:
        """Reload the feed for the current category, starting again at page 1.

        Replaces the article list. If nothing comes back, error_message is
        "No news available".

        Args:
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - feed state: category, status, page, loading flags, error_message, articles
        """
        logger = get_logger(__name__)
        logger.info("load_all called")

        await controller.load_all()
        return {"success": True, **feed_snapshot(controller)}

    async def load_more(ctx: Context = None) -> Dict[str, Any]:
        """Fetch the next page of the current category and append it to the feed.

        Ignored while another page is still loading. On failure the existing
        articles are kept and error_message describes the problem.

        Args:
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - feed state: category, status, page, loading flags, error_message, articles
        """
        logger = get_logger(__name__)
        logger.info("load_more called")

        await controller.load_more()
        return {"success": True, **feed_snapshot(controller)}

    async def load_latest(ctx: Context = None) -> Dict[str, Any]:
        """Replace the feed with the five most recent articles of the current category.

        Args:
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - feed state: category, status, page, loading flags, error_message, articles
        """
        logger = get_logger(__name__)
        logger.info("load_latest called")

        await controller.load_latest()
        return {"success": True, **feed_snapshot(controller)}

    async def list_articles(ctx: Context = None) -> Dict[str, Any]:
        """List the articles currently in the feed without fetching anything.

        Each article carries its relative publication time ("5h ago",
        "Yesterday") and its read and bookmark flags.

        Args:
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - feed state: category, status, page, loading flags, error_message, articles
        """
        logger = get_logger(__name__)
        logger.info("list_articles called")

        return {"success": True, **feed_snapshot(controller)}

    async def toggle_read(article_id: str, ctx: Context = None) -> Dict[str, Any]:
        """Mark a loaded article as read, or as unread if it already is.

        Read state lasts for the session only.

        Args:
            article_id: Article id (its URL, from list_articles)
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - article: object with id, title, url, is_read, is_bookmarked
            - error: string if the article is not in the feed
        """
        logger = get_logger(__name__)
        logger.info(f"toggle_read called: article_id={article_id}")

        article = controller.find_article(article_id)
        if article is None:
            return {
                "success": False,
                "error": f"Article '{article_id}' is not in the current feed",
            }

        controller.toggle_read(article)
        return {
            "success": True,
            "article": article_to_dict(controller, article),
        }

    async def toggle_bookmark(article_id: str, ctx: Context = None) -> Dict[str, Any]:
        """Bookmark a loaded article, or remove its bookmark if it has one.

        Bookmarks are saved immediately and restored when the server starts.

        Args:
            article_id: Article id (its URL, from list_articles)
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - article: object with id, title, url, is_read, is_bookmarked
            - error: string if the article is not in the feed
        """
        logger = get_logger(__name__)
        logger.info(f"toggle_bookmark called: article_id={article_id}")

        article = controller.find_article(article_id)
        if article is None:
            return {
                "success": False,
                "error": f"Article '{article_id}' is not in the current feed",
            }

        await controller.toggle_bookmark(article)
        return {
            "success": True,
            "article": article_to_dict(controller, article),
        }

    async def list_bookmarks(ctx: Context = None) -> Dict[str, Any]:
        """List the ids of all bookmarked articles, including ones not currently loaded.

        Args:
            ctx: MCP Context object (injected automatically)

        Returns:
            Dictionary with:
            - success: bool
            - count: number of bookmarks
            - bookmarks: sorted list of article ids
        """
        logger = get_logger(__name__)
        logger.info("list_bookmarks called")

        bookmarks = sorted(controller.state.bookmarked_ids)
        return {
            "success": True,
            "count": len(bookmarks),
            "bookmarks": bookmarks,
        }

    return [
        select_category,
        load_all,
        load_more,
        load_latest,
        list_articles,
        toggle_read,
        toggle_bookmark,
        list_bookmarks,
    ]
