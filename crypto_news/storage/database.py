"""Database storage for crypto_news.

This module provides an async SQLite key/value store for user preferences
such as bookmarked article IDs.
Database location: ~/.crypto_news/crypto_news.db (or CRYPTO_NEWS_DB_PATH env var)
"""

import json
import os
import aiosqlite
from pathlib import Path
from typing import List, Optional, Sequence

from crypto_news.config import DEFAULT_DB_PATH
from crypto_news.logging_config import get_logger


def _get_db_path() -> Path:
    """Get the database path, respecting CRYPTO_NEWS_DB_PATH env var for testing."""
    env_path = os.environ.get("CRYPTO_NEWS_DB_PATH")
    if env_path:
        return Path(env_path)
    return DEFAULT_DB_PATH


# Singleton connection
_db_connection: Optional[aiosqlite.Connection] = None


async def get_database() -> aiosqlite.Connection:
    """Get or create a singleton database connection.

    Returns:
        Active database connection
    """
    global _db_connection

    if _db_connection is None:
        db_path = _get_db_path()
        # Ensure directory exists
        db_path.parent.mkdir(parents=True, exist_ok=True)

        _db_connection = await aiosqlite.connect(db_path)
        _db_connection.row_factory = aiosqlite.Row
        await init_database(_db_connection)

    return _db_connection


async def init_database(db: Optional[aiosqlite.Connection] = None) -> None:
    """Initialize database tables if they don't exist.

    Args:
        db: Optional database connection (uses singleton if not provided)
    """
    if db is None:
        db = await get_database()

    await db.execute("""
        CREATE TABLE IF NOT EXISTS preferences (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    await db.commit()


async def read_string_list(key: str) -> Optional[List[str]]:
    """Read a list of strings stored under a key.

    Args:
        key: Preference key

    Returns:
        The stored list, or None if the key is absent or holds something else
    """
    logger = get_logger(__name__)
    db = await get_database()

    cursor = await db.execute("SELECT value FROM preferences WHERE key = ?", (key,))
    row = await cursor.fetchone()

    if row is None:
        return None

    try:
        value = json.loads(row["value"])
    except ValueError:
        logger.warning(f"Ignoring unreadable preference value for key: {key}")
        return None

    if not isinstance(value, list):
        logger.warning(f"Ignoring non-list preference value for key: {key}")
        return None

    return [item for item in value if isinstance(item, str)]


async def write_string_list(key: str, values: Sequence[str]) -> None:
    """Store a list of strings under a key, replacing any previous value.

    Args:
        key: Preference key
        values: Strings to store, in order
    """
    db = await get_database()

    await db.execute(
        """
        INSERT INTO preferences (key, value, updated_at)
        VALUES (?, ?, CURRENT_TIMESTAMP)
        ON CONFLICT(key) DO UPDATE SET
            value = excluded.value,
            updated_at = excluded.updated_at
        """,
        (key, json.dumps(list(values))),
    )
    await db.commit()


async def close_database() -> None:
    """Close the database connection."""
    global _db_connection

    if _db_connection is not None:
        await _db_connection.close()
        _db_connection = None


class PreferenceStore:
    """Persistence capability over the module-level preference functions."""

    async def read_string_list(self, key: str) -> Optional[List[str]]:
        return await read_string_list(key)

    async def write_string_list(self, key: str, values: Sequence[str]) -> None:
        await write_string_list(key, values)
