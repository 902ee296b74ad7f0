"""Article parser service.

This module turns raw news API records into Article objects and formats
publication times for display.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, List, Mapping, Optional, Pattern, Tuple

from crypto_news.errors import DecodeError
from crypto_news.logging_config import get_logger
from crypto_news.models.schemas import Article, DEFAULT_SOURCE_NAME


_DATE_TIME = r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}"
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")

# ISO 8601 strategies, tried before the fallback patterns
ISO_STRATEGIES: List[Tuple[str, Pattern[str], str]] = [
    (
        "iso8601-fractional",
        re.compile(_DATE_TIME + r"\.\d+(?:Z|[+-]\d{2}:\d{2})"),
        "%Y-%m-%dT%H:%M:%S.%f%z",
    ),
    (
        "iso8601-internet",
        re.compile(_DATE_TIME + r"(?:Z|[+-]\d{2}:\d{2})"),
        "%Y-%m-%dT%H:%M:%S%z",
    ),
]

# Explicit fallback patterns, interpreted in UTC
FALLBACK_STRATEGIES: List[Tuple[str, Pattern[str], str]] = [
    (
        "yyyy-MM-dd'T'HH:mm:ssXXXXX",
        re.compile(_DATE_TIME + r"(?:Z|[+-]\d{2}:\d{2}(?::\d{2})?)"),
        "%Y-%m-%dT%H:%M:%S%z",
    ),
    (
        "yyyy-MM-dd'T'HH:mm:ss.SSSXXXXX",
        re.compile(_DATE_TIME + r"\.\d{3}(?:Z|[+-]\d{2}:\d{2}(?::\d{2})?)"),
        "%Y-%m-%dT%H:%M:%S.%f%z",
    ),
    (
        "yyyy-MM-dd'T'HH:mm:ssZ",
        re.compile(_DATE_TIME + r"[+-]\d{4}"),
        "%Y-%m-%dT%H:%M:%S%z",
    ),
]


def parse_article(raw: Mapping[str, Any]) -> Article:
    """Parse a raw news record into an Article.

    Args:
        raw: Record with title, url, publishedAt and optional description,
            urlToImage and sourceName

    Returns:
        Article with a timezone-aware published_at

    Raises:
        DecodeError: If the record is not a mapping or lacks title or url
    """
    if not isinstance(raw, Mapping):
        raise DecodeError("title", f"Expected an article object, got {type(raw).__name__}")

    title = _required_string(raw, "title")
    url = _required_string(raw, "url")

    return Article(
        title=title,
        url=url,
        published_at=_published_at_or_now(raw.get("publishedAt")),
        description=_optional_string(raw, "description"),
        image_url=_optional_string(raw, "urlToImage"),
        source_name=_optional_string(raw, "sourceName") or DEFAULT_SOURCE_NAME,
    )


def parse_published_at(value: str) -> Optional[datetime]:
    """Parse a publication timestamp using the strategy cascade.

    ISO 8601 forms are tried first, then the explicit fallback patterns.
    Naive results are taken to be UTC.

    Args:
        value: Raw timestamp string

    Returns:
        Aware UTC datetime, or None if no strategy matches
    """
    logger = get_logger(__name__)

    for name, pattern, fmt in ISO_STRATEGIES + FALLBACK_STRATEGIES:
        if not pattern.fullmatch(value):
            continue
        try:
            # %f takes at most microseconds
            parsed = datetime.strptime(_EXTRA_FRACTION.sub(r"\1", value), fmt)
        except ValueError:
            continue

        logger.debug(f"Parsed timestamp {value!r} with {name}")
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    return None


def relative_time(article: Article, now: Optional[datetime] = None) -> str:
    """Human-friendly "time ago" string, e.g. "5h ago", "30m ago", "Yesterday".

    The "Yesterday" check compares calendar days in the timezone of `now`.

    Args:
        article: Article to describe
        now: Reference time (defaults to the current local time)

    Returns:
        Display string for the article's age
    """
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    interval = (now - article.published_at).total_seconds()

    if interval < 60:
        return "Just now"
    elif interval < 3600:
        return f"{int(interval // 60)}m ago"
    elif interval < 86400:
        return f"{int(interval // 3600)}h ago"
    elif _is_day_before(article.published_at, now):
        return "Yesterday"
    else:
        return f"{int(interval // 86400)}d ago"


def _is_day_before(moment: datetime, now: datetime) -> bool:
    local_day = moment.astimezone(now.tzinfo).date()
    return local_day == now.date() - timedelta(days=1)


def _published_at_or_now(value: Any) -> datetime:
    logger = get_logger(__name__)

    parsed = parse_published_at(value) if isinstance(value, str) else None
    if parsed is None:
        logger.warning(f"Failed to parse publishedAt ({value!r}), defaulting to now")
        return datetime.now(timezone.utc)

    return parsed


def _required_string(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise DecodeError(key)
    return value


def _optional_string(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    return value if isinstance(value, str) else None
