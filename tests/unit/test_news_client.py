"""Unit tests for the news API client."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from crypto_news.config import ServerConfig
from crypto_news.errors import FetchError
from crypto_news.services.news_client import NewsClient


# Mark all tests as async
pytestmark = pytest.mark.anyio


NEWSAPI_PAYLOAD = {
    "status": "ok",
    "totalResults": 2,
    "articles": [
        {
            "source": {"id": None, "name": "CoinDesk"},
            "author": "Jane Doe",
            "title": "Bitcoin tops $70k",
            "description": "Prices climbed overnight.",
            "url": "https://www.coindesk.com/markets/btc-70k",
            "urlToImage": "https://www.coindesk.com/img/btc.jpg",
            "publishedAt": "2024-05-01T13:45:30Z",
            "content": "...",
        },
        {
            "source": {"id": None, "name": ""},
            "title": "ETH gas fees fall",
            "description": None,
            "url": "https://example.com/eth-gas",
            "urlToImage": None,
            "publishedAt": "2024-05-01T12:00:00Z",
        },
    ],
}


def mock_json_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.raise_for_status = MagicMock()
    response.json = MagicMock(return_value=payload)
    return response


def patched_client(get):
    """Patch httpx.AsyncClient in the news client module with a given get()."""
    patcher = patch("crypto_news.services.news_client.httpx.AsyncClient")
    mock_client = patcher.start()
    mock_instance = AsyncMock()
    mock_instance.get = get
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=None)
    mock_client.return_value = mock_instance
    return patcher, mock_client, mock_instance


@pytest.fixture
def client():
    return NewsClient("https://newsapi.example.com/v2/", api_key="secret", page_size=10)


class TestFetchPage:
    """Tests for NewsClient.fetch_page."""

    async def test_fetch_page_maps_articles(self, client):
        """Test that NewsAPI articles become flat raw records."""
        patcher, _, _ = patched_client(AsyncMock(return_value=mock_json_response(NEWSAPI_PAYLOAD)))
        try:
            records = await client.fetch_page("bitcoin", 2)
        finally:
            patcher.stop()

        assert len(records) == 2
        assert records[0]["sourceName"] == "CoinDesk"
        assert "source" not in records[0]
        assert records[0]["title"] == "Bitcoin tops $70k"
        assert records[0]["urlToImage"] == "https://www.coindesk.com/img/btc.jpg"
        # Empty source names are left for the parser default
        assert "sourceName" not in records[1]

    async def test_fetch_page_sends_query_and_page(self, client):
        get = AsyncMock(return_value=mock_json_response({"status": "ok", "articles": []}))
        patcher, mock_client, _ = patched_client(get)
        try:
            await client.fetch_page("ethereum", 3)
        finally:
            patcher.stop()

        url = get.await_args.args[0]
        params = get.await_args.kwargs["params"]
        assert url == "https://newsapi.example.com/v2/everything"
        assert params["q"] == "ethereum"
        assert params["page"] == 3
        assert params["pageSize"] == 10

        headers = mock_client.call_args.kwargs["headers"]
        assert headers["X-Api-Key"] == "secret"

    async def test_fetch_page_without_api_key_omits_header(self):
        client = NewsClient("https://newsapi.example.com/v2")
        get = AsyncMock(return_value=mock_json_response({"status": "ok", "articles": []}))
        patcher, mock_client, _ = patched_client(get)
        try:
            await client.fetch_page("crypto", 1)
        finally:
            patcher.stop()

        assert "X-Api-Key" not in mock_client.call_args.kwargs["headers"]

    async def test_fetch_page_empty_articles(self, client):
        patcher, _, _ = patched_client(AsyncMock(return_value=mock_json_response({"status": "ok"})))
        try:
            records = await client.fetch_page("crypto", 9)
        finally:
            patcher.stop()

        assert records == []

    async def test_fetch_page_transport_error(self, client):
        """Test that transport failures become FetchError."""
        patcher, _, _ = patched_client(AsyncMock(side_effect=httpx.ConnectError("Connection failed")))
        try:
            with pytest.raises(FetchError, match="Connection failed"):
                await client.fetch_page("crypto", 1)
        finally:
            patcher.stop()

    async def test_fetch_page_http_status_error(self, client):
        """Test that non-2xx responses become FetchError with the API message."""
        request = httpx.Request("GET", "https://newsapi.example.com/v2/everything")
        response = httpx.Response(
            429,
            json={"status": "error", "code": "rateLimited", "message": "Too many requests"},
            request=request,
        )
        patcher, _, _ = patched_client(AsyncMock(return_value=response))
        try:
            with pytest.raises(FetchError, match="Too many requests") as exc_info:
                await client.fetch_page("crypto", 1)
        finally:
            patcher.stop()

        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    async def test_fetch_page_api_error_payload(self, client):
        payload = {"status": "error", "code": "apiKeyInvalid", "message": "Your API key is invalid."}
        patcher, _, _ = patched_client(AsyncMock(return_value=mock_json_response(payload)))
        try:
            with pytest.raises(FetchError, match="API key is invalid"):
                await client.fetch_page("crypto", 1)
        finally:
            patcher.stop()

    async def test_fetch_page_non_json_body(self, client):
        response = mock_json_response(None)
        response.json = MagicMock(side_effect=ValueError("Expecting value"))
        patcher, _, _ = patched_client(AsyncMock(return_value=response))
        try:
            with pytest.raises(FetchError, match="unreadable"):
                await client.fetch_page("crypto", 1)
        finally:
            patcher.stop()


class TestFromConfig:
    def test_from_config(self):
        config = ServerConfig(
            news_api_base_url="https://api.example.com/v2",
            news_api_key="k",
            page_size=50,
            request_timeout=5.0,
        )

        client = NewsClient.from_config(config)

        assert client.base_url == "https://api.example.com/v2"
        assert client.api_key == "k"
        assert client.page_size == 50
        assert client.timeout == 5.0
