"""News API client.

This module fetches pages of articles from a NewsAPI-style `/everything`
endpoint and returns them as raw records for the article parser.
"""

from typing import Any, Dict, List, Optional

import httpx

from crypto_news.config import ServerConfig
from crypto_news.errors import FetchError
from crypto_news.logging_config import get_logger


USER_AGENT = "CryptoNews/1.0 (News Feed Reader)"


class NewsClient:
    """Fetch capability backed by a remote news API."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        page_size: int = 20,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.page_size = page_size
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ServerConfig) -> "NewsClient":
        return cls(
            base_url=config.news_api_base_url,
            api_key=config.news_api_key,
            page_size=config.page_size,
            timeout=config.request_timeout,
        )

    async def fetch_page(self, query: str, page: int) -> List[Dict[str, Any]]:
        """Fetch one page of articles for a search query.

        Args:
            query: Search query (e.g. "bitcoin")
            page: 1-based page number

        Returns:
            List of raw article records in the wire shape expected by
            parse_article

        Raises:
            FetchError: On transport errors, non-2xx responses, API error
                payloads or bodies that are not JSON
        """
        logger = get_logger(__name__)
        logger.info(f"Fetching news: query={query}, page={page}")

        params = {
            "q": query,
            "page": page,
            "pageSize": self.page_size,
            "sortBy": "publishedAt",
            "language": "en",
        }
        headers = {"User-Agent": USER_AGENT}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key

        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.timeout,
            headers=headers,
        ) as client:
            try:
                response = await client.get(f"{self.base_url}/everything", params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"News API returned {e.response.status_code}: {e}")
                raise FetchError(_describe_status_error(e.response)) from e
            except httpx.HTTPError as e:
                logger.error(f"Failed to fetch news: {e}")
                raise FetchError(f"Could not reach the news service: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"News API returned a non-JSON body: {e}")
            raise FetchError("The news service returned an unreadable response") from e

        if not isinstance(payload, dict):
            raise FetchError("The news service returned an unexpected response")

        if payload.get("status") == "error":
            message = payload.get("message") or payload.get("code") or "unknown error"
            raise FetchError(f"The news service reported an error: {message}")

        articles = [_to_raw_record(item) for item in payload.get("articles") or []]

        logger.info(f"Fetched {len(articles)} articles for query={query}, page={page}")
        return articles


def _to_raw_record(item: Any) -> Any:
    """Flatten NewsAPI's nested source object into sourceName.

    Non-dict items pass through untouched so the parser can reject them.
    """
    if not isinstance(item, dict):
        return item

    record = dict(item)
    source = record.pop("source", None)
    if "sourceName" not in record and isinstance(source, dict):
        name: Optional[str] = source.get("name")
        if name:
            record["sourceName"] = name

    return record


def _describe_status_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and body.get("message"):
        return f"News request failed ({response.status_code}): {body['message']}"
    return f"News request failed with status {response.status_code}"
