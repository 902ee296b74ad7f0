"""Configuration for crypto_news.

Values come from environment variables, optionally loaded from a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_DB_PATH = Path.home() / ".crypto_news" / "crypto_news.db"


@dataclass
class ServerConfig:
    """Runtime settings for the server, news client and storage."""

    name: str = "crypto_news"
    log_level: str = "INFO"
    news_api_base_url: str = "https://newsapi.org/v2"
    news_api_key: str = ""
    page_size: int = 20
    request_timeout: float = 30.0
    db_path: Path = DEFAULT_DB_PATH


def load_config() -> ServerConfig:
    """Build a ServerConfig from the environment.

    Returns:
        ServerConfig populated from env vars, falling back to defaults
    """
    load_dotenv()

    db_path = os.getenv("CRYPTO_NEWS_DB_PATH")

    return ServerConfig(
        name=os.getenv("CRYPTO_NEWS_SERVER_NAME", "crypto_news"),
        log_level=os.getenv("CRYPTO_NEWS_LOG_LEVEL", "INFO").upper(),
        news_api_base_url=os.getenv("NEWS_API_BASE_URL", "https://newsapi.org/v2").rstrip("/"),
        news_api_key=os.getenv("NEWS_API_KEY", ""),
        page_size=int(os.getenv("NEWS_API_PAGE_SIZE", "20")),
        request_timeout=float(os.getenv("NEWS_API_TIMEOUT", "30.0")),
        db_path=Path(db_path) if db_path else DEFAULT_DB_PATH,
    )


_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config

    if _config is None:
        _config = load_config()

    return _config
