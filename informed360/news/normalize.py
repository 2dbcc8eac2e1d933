"""Raw feed item to canonical Article.

Cleans the title, picks an image, normalizes the timestamp, labels the
source, assigns a category and scores sentiment. Items without a usable
title or link are rejected (``None``).
"""

from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from informed360.logging_setup import get_logger
from informed360.news.categorize import categorize
from informed360.news.models import Article, FeedSource, RawFeedItem
from informed360.news.sentiment import SentimentScorer

logger = get_logger("news.normalize")

PLACEHOLDER_IMAGE = "https://placehold.co/800x450?text=Informed360"
DEFAULT_SOURCE_LABEL = "Source"
SNIPPET_LENGTH = 200

_WHITESPACE_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]+>")
_IMG_SRC_RE = re.compile(r"""<img[^>]+src=["']([^"']+)["']""", re.IGNORECASE)

# Common RSS date formats
_DATE_FORMATS = [
    "%a, %d %b %Y %H:%M:%S %z",  # RFC 822
    "%a, %d %b %Y %H:%M:%S GMT",
    "%d %b %Y %H:%M:%S %z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S.%fZ",
]


def clean_title(text: Optional[str]) -> str:
    """Unescape HTML entities, collapse whitespace runs and trim."""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", html.unescape(str(text))).strip()


def strip_link(link: Optional[str]) -> str:
    """Dedup key: the link without query string or fragment."""
    if not link:
        return ""
    link = link.strip()
    try:
        parts = urlsplit(link)
    except ValueError:
        return link.split("?", 1)[0].split("#", 1)[0]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def extract_image(item: RawFeedItem) -> str:
    """Best-effort image URL for an item.

    Order: enclosure, media content, image object, first ``<img src>`` in
    any HTML field, then the placeholder.
    """
    for url in (item.enclosure_url, item.media_content_url, item.image_url):
        if url and isinstance(url, str) and url.strip():
            return url.strip()

    for markup in (item.content, item.summary):
        if isinstance(markup, str):
            match = _IMG_SRC_RE.search(markup)
            if match:
                return html.unescape(match.group(1))

    return PLACEHOLDER_IMAGE


def _parse_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse ISO-8601 and the common RSS date formats to an aware datetime."""
    if not date_str:
        return None

    date_str = _WHITESPACE_RE.sub(" ", date_str.strip())

    try:
        dt = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        dt = None

    if dt is None:
        for fmt in _DATE_FORMATS:
            try:
                dt = datetime.strptime(date_str, fmt)
                break
            except ValueError:
                continue

    if dt is None:
        try:
            dt = parsedate_to_datetime(date_str)
        except (TypeError, ValueError, IndexError, OverflowError):
            logger.debug("Could not parse date: %s", date_str)
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    # Offsets near datetime.min/max cannot be shifted to UTC
    try:
        return dt.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        logger.debug("Date out of range: %s", date_str)
        return None


def format_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with seconds precision, e.g. ``2024-01-15T12:00:00+00:00``."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat()


def normalize_timestamp(item: RawFeedItem, fetched_at: Optional[datetime] = None) -> str:
    """ISO field, then generic publish date, then fetch time."""
    for candidate in (item.iso_date, item.pub_date):
        dt = _parse_date(candidate)
        if dt is not None:
            return format_timestamp(dt)
    return format_timestamp(fetched_at or datetime.now(timezone.utc))


def derive_source_label(source: FeedSource, feed_title: Optional[str] = None) -> str:
    """Feed hostname without ``www.``, else the feed's title, else "Source"."""
    try:
        hostname = urlsplit(source.url).hostname or ""
    except ValueError:
        hostname = ""

    if hostname.startswith("www."):
        hostname = hostname[4:]
    if hostname:
        return hostname

    title = clean_title(feed_title)
    return title or DEFAULT_SOURCE_LABEL


def _snippet(item: RawFeedItem) -> str:
    markup = item.summary or item.content or ""
    text = clean_title(_TAG_RE.sub(" ", markup))
    return text[:SNIPPET_LENGTH]


def normalize_item(
    item: RawFeedItem,
    source: FeedSource,
    scorer: SentimentScorer,
    feed_title: Optional[str] = None,
    fetched_at: Optional[datetime] = None,
    include_snippet: bool = False,
) -> Optional[Article]:
    """Build an Article from a raw item, or None when it is unusable.

    Args:
        item: Parsed feed item.
        source: Feed the item came from.
        scorer: Sentiment scorer applied to the title.
        feed_title: The feed's own declared title, for source labelling.
        fetched_at: Fallback timestamp for undated items.
        include_snippet: Score the title together with a short content snippet.

    Returns:
        The Article, or None if the title or link is missing.
    """
    title = clean_title(item.title)
    raw_link = item.link or (item.guid if item.guid and item.guid.startswith("http") else None)
    link = strip_link(raw_link)

    if not title or not link:
        return None

    text = title
    if include_snippet:
        snippet = _snippet(item)
        if snippet:
            text = f"{title}. {snippet}"

    return Article(
        title=title,
        link=link,
        image=extract_image(item),
        published_at=normalize_timestamp(item, fetched_at),
        source=derive_source_label(source, feed_title),
        category=categorize(title, source.category),
        sentiment=scorer.score(text),
    )
