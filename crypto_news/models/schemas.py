"""Data models for crypto_news.

This module defines the core data structures for articles, news categories
and the feed state owned by the feed controller.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Set


DEFAULT_SOURCE_NAME = "Unknown Source"


@dataclass(frozen=True, eq=False)
class Article:
    """Represents a single news article.

    The article URL is its identity: equality and hashing only look at it.
    """

    title: str
    url: str
    published_at: datetime
    description: Optional[str] = None
    image_url: Optional[str] = None
    source_name: str = DEFAULT_SOURCE_NAME

    @property
    def id(self) -> str:
        return self.url

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)


class NewsCategory(Enum):
    """News categories for filtering the feed."""

    ALL = "All"
    BITCOIN = "Bitcoin"
    ETHEREUM = "Ethereum"

    @property
    def query(self) -> str:
        """Query parameter sent to the news API."""
        return _CATEGORY_QUERIES[self]

    @classmethod
    def from_name(cls, name: str) -> "NewsCategory":
        """Look up a category by display name or enum name, ignoring case.

        Raises:
            ValueError: If no category matches
        """
        wanted = name.strip().lower()
        for category in cls:
            if wanted in (category.value.lower(), category.name.lower()):
                return category
        choices = ", ".join(c.value for c in cls)
        raise ValueError(f"Unknown category '{name}'. Choose one of: {choices}")


_CATEGORY_QUERIES = {
    NewsCategory.ALL: "crypto",
    NewsCategory.BITCOIN: "bitcoin",
    NewsCategory.ETHEREUM: "ethereum",
}


class FeedStatus(Enum):
    """Coarse state of a feed, derived from FeedState flags."""

    IDLE = "idle"
    LOADING_INITIAL = "loading_initial"
    LOADED = "loaded"
    LOADING_MORE = "loading_more"
    ERROR = "error"


@dataclass
class FeedState:
    """Mutable state of one feed session."""

    articles: List[Article] = field(default_factory=list)
    page: int = 1
    is_loading_initial: bool = False
    is_loading_more: bool = False
    error_message: Optional[str] = None
    read_ids: Set[str] = field(default_factory=set)
    bookmarked_ids: Set[str] = field(default_factory=set)

    @property
    def status(self) -> FeedStatus:
        if self.is_loading_initial:
            return FeedStatus.LOADING_INITIAL
        if self.is_loading_more:
            return FeedStatus.LOADING_MORE
        if self.error_message:
            return FeedStatus.ERROR
        if self.articles:
            return FeedStatus.LOADED
        return FeedStatus.IDLE
