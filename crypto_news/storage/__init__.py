"""Storage layer for crypto_news."""

from .database import (
    PreferenceStore,
    get_database,
    init_database,
    close_database,
    read_string_list,
    write_string_list,
)

__all__ = [
    "PreferenceStore",
    "get_database",
    "init_database",
    "close_database",
    "read_string_list",
    "write_string_list",
]
