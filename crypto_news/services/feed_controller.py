"""Feed controller.

This module owns the state of one news feed session: the visible articles,
the pagination cursor, loading and error flags, and the read and bookmarked
article sets. All failures are absorbed into `error_message`; no operation
raises to its caller.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Sequence

from crypto_news.logging_config import get_logger
from crypto_news.models.schemas import Article, FeedState, FeedStatus, NewsCategory
from crypto_news.services import article_parser


FetchPage = Callable[[str, int], Awaitable[Sequence[Mapping[str, Any]]]]

BOOKMARKS_KEY = "bookmarkedArticleIDs"
LATEST_LIMIT = 5
NO_NEWS_MESSAGE = "No news available"


class FeedController:
    """State holder for a paginated, category-filtered news feed.

    Args:
        fetch_page: Async callable returning raw article records for
            (query, page)
        store: Object with async read_string_list(key) and
            write_string_list(key, values), used for bookmarks
        category: Initially selected category
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        store: Any,
        category: NewsCategory = NewsCategory.ALL,
    ):
        self._fetch_page = fetch_page
        self._store = store
        self.category = category
        self.state = FeedState()

    # Read-only views for the presentation layer

    @property
    def articles(self) -> List[Article]:
        return self.state.articles

    @property
    def page(self) -> int:
        return self.state.page

    @property
    def is_loading_initial(self) -> bool:
        return self.state.is_loading_initial

    @property
    def is_loading_more(self) -> bool:
        return self.state.is_loading_more

    @property
    def error_message(self) -> Optional[str]:
        return self.state.error_message

    @property
    def status(self) -> FeedStatus:
        return self.state.status

    # Loading

    async def select_category(self, category: NewsCategory) -> None:
        """Switch category and reload the feed from the first page."""
        logger = get_logger(__name__)
        logger.info(f"Category selected: {category.value}")

        self.category = category
        await self.load_all()

    async def load_all(self, category: Optional[NewsCategory] = None) -> None:
        """Replace the feed with the first page of the category."""
        await self._load_first_page(category, limit=None)

    async def load_latest(self, category: Optional[NewsCategory] = None) -> None:
        """Replace the feed with the first few articles of the category."""
        await self._load_first_page(category, limit=LATEST_LIMIT)

    async def load_more(self) -> None:
        """Fetch the next page and append it to the feed.

        Does nothing while a previous load_more is still pending.
        """
        logger = get_logger(__name__)

        if self.state.is_loading_more:
            logger.debug("load_more ignored: a page is already loading")
            return

        self.state.is_loading_more = True
        try:
            self.state.page += 1
            page = self.state.page
            logger.info(f"Loading page {page} for {self.category.value}")

            try:
                fetched = await self._fetch_articles(page)
            except Exception as e:
                logger.error(f"Failed to load page {page}: {e}")
                self.state.error_message = _describe(e)
                return

            self.state.articles.extend(fetched)
        finally:
            self.state.is_loading_more = False

    async def _load_first_page(
        self,
        category: Optional[NewsCategory],
        limit: Optional[int],
    ) -> None:
        logger = get_logger(__name__)

        if category is not None:
            self.category = category

        self.state.is_loading_initial = True
        self.state.page = 1
        try:
            logger.info(f"Loading news for {self.category.value}")
            try:
                fetched = await self._fetch_articles(1)
            except Exception as e:
                logger.error(f"Failed to load news for {self.category.value}: {e}")
                self.state.articles = []
                self.state.error_message = _describe(e)
                return

            self.state.articles = fetched[:limit] if limit is not None else fetched
            self.state.error_message = None if fetched else NO_NEWS_MESSAGE
        finally:
            self.state.is_loading_initial = False

    async def _fetch_articles(self, page: int) -> List[Article]:
        records = await self._fetch_page(self.category.query, page)
        return [article_parser.parse_article(record) for record in records]

    # Read state

    def toggle_read(self, article: Article) -> bool:
        """Flip the read flag of an article.

        Returns:
            True if the article is now read
        """
        if article.id in self.state.read_ids:
            self.state.read_ids.discard(article.id)
        else:
            self.state.read_ids.add(article.id)
        return self.is_read(article)

    def is_read(self, article: Article) -> bool:
        return article.id in self.state.read_ids

    # Bookmarks

    async def load_bookmarks(self) -> None:
        """Restore bookmarked article IDs from the store."""
        logger = get_logger(__name__)

        try:
            saved = await self._store.read_string_list(BOOKMARKS_KEY)
        except Exception as e:
            logger.error(f"Failed to load bookmarks: {e}")
            self.state.error_message = f"Could not load bookmarks: {e}"
            return

        self.state.bookmarked_ids = set(saved or [])
        logger.info(f"Loaded {len(self.state.bookmarked_ids)} bookmarks")

    async def toggle_bookmark(self, article: Article) -> bool:
        """Flip the bookmark flag of an article and persist all bookmarks.

        Returns:
            True if the article is now bookmarked
        """
        logger = get_logger(__name__)

        if article.id in self.state.bookmarked_ids:
            self.state.bookmarked_ids.discard(article.id)
        else:
            self.state.bookmarked_ids.add(article.id)

        try:
            await self._store.write_string_list(BOOKMARKS_KEY, sorted(self.state.bookmarked_ids))
        except Exception as e:
            logger.error(f"Failed to save bookmarks: {e}")
            self.state.error_message = f"Could not save bookmarks: {e}"

        return self.is_bookmarked(article)

    def is_bookmarked(self, article: Article) -> bool:
        return article.id in self.state.bookmarked_ids

    # Display

    def relative_time(self, article: Article, now: Optional[datetime] = None) -> str:
        return article_parser.relative_time(article, now)

    def find_article(self, article_id: str) -> Optional[Article]:
        """Find a loaded article by its id."""
        for article in self.state.articles:
            if article.id == article_id:
                return article
        return None


def _describe(error: Exception) -> str:
    return str(error) or error.__class__.__name__
