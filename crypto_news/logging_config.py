import logging
import sys
from typing import Optional

from crypto_news.config import ServerConfig


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: Optional[ServerConfig] = None) -> logging.Logger:
    """Configure and return the root logger for the application.

    Logs go to stderr so they never mix with the STDIO transport on stdout.
    """
    root = logging.getLogger("crypto_news")
    level_name = config.log_level if config else "INFO"
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(log_level)

    # Only add handler if it doesn't already exist (avoid duplicate handlers)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module inside the crypto_news namespace."""
    if not name.startswith("crypto_news"):
        name = f"crypto_news.{name}"
    return logging.getLogger(name)


logger = logging.getLogger("crypto_news")

__all__ = ["logger", "setup_logging", "get_logger"]
