"""Unit tests for configuration loading."""

from pathlib import Path

from crypto_news.config import DEFAULT_DB_PATH, load_config


ENV_VARS = [
    "CRYPTO_NEWS_SERVER_NAME",
    "CRYPTO_NEWS_LOG_LEVEL",
    "NEWS_API_BASE_URL",
    "NEWS_API_KEY",
    "NEWS_API_PAGE_SIZE",
    "NEWS_API_TIMEOUT",
    "CRYPTO_NEWS_DB_PATH",
]


def test_defaults(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("crypto_news.config.load_dotenv", lambda: False)

    config = load_config()

    assert config.name == "crypto_news"
    assert config.log_level == "INFO"
    assert config.news_api_base_url == "https://newsapi.org/v2"
    assert config.news_api_key == ""
    assert config.page_size == 20
    assert config.request_timeout == 30.0
    assert config.db_path == DEFAULT_DB_PATH


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CRYPTO_NEWS_LOG_LEVEL", "debug")
    monkeypatch.setenv("NEWS_API_BASE_URL", "https://proxy.example.com/v2/")
    monkeypatch.setenv("NEWS_API_KEY", "abc123")
    monkeypatch.setenv("NEWS_API_PAGE_SIZE", "50")
    monkeypatch.setenv("NEWS_API_TIMEOUT", "7.5")
    monkeypatch.setenv("CRYPTO_NEWS_DB_PATH", str(tmp_path / "news.db"))

    config = load_config()

    assert config.log_level == "DEBUG"
    assert config.news_api_base_url == "https://proxy.example.com/v2"
    assert config.news_api_key == "abc123"
    assert config.page_size == 50
    assert config.request_timeout == 7.5
    assert config.db_path == Path(tmp_path / "news.db")
