"""Feed aggregation pipeline.

Fetches every configured feed, normalizes the items, applies the sentiment
filter, deduplicates by stripped link, sorts newest first and caps the
list. One failing feed never costs the others their items, and the
pipeline as a whole never raises.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Set

from informed360.config import Config, get_config
from informed360.logging_setup import get_logger
from informed360.news.models import SENTIMENT_LABELS, Article, FeedSource
from informed360.news.normalize import normalize_item
from informed360.news.pull import FeedClient, FeedFailure, FeedResult, FeedSuccess
from informed360.news.sentiment import SentimentScorer
from informed360.news.sources import load_sources

logger = get_logger("news.aggregate")

FILTER_ALL = "all"
MAX_ARTICLES = 80


def normalize_filter_label(value: Optional[str]) -> str:
    """Lowercase a filter label; anything unrecognised means ``all``."""
    label = (value or FILTER_ALL).strip().lower()
    return label if label in SENTIMENT_LABELS else FILTER_ALL


def collect_articles(
    result: FeedSuccess,
    scorer: SentimentScorer,
    filter_label: str = FILTER_ALL,
    fetched_at: Optional[datetime] = None,
    include_snippet: bool = False,
) -> List[Article]:
    """Normalize one feed's items and keep those passing the label filter."""
    articles: List[Article] = []

    for item in result.items:
        try:
            article = normalize_item(
                item,
                result.source,
                scorer,
                feed_title=result.feed_title,
                fetched_at=fetched_at,
                include_snippet=include_snippet,
            )
        except Exception as e:
            logger.debug("Dropping item %r from %s: %s", item.link, result.source.url, e)
            continue
        if article is None:
            continue
        if filter_label == FILTER_ALL or article.sentiment.label == filter_label:
            articles.append(article)

    return articles


def dedupe_articles(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article seen for each link."""
    seen: Set[str] = set()
    unique: List[Article] = []

    for article in articles:
        if article.link in seen:
            continue
        seen.add(article.link)
        unique.append(article)

    return unique


def rank_articles(articles: Iterable[Article], limit: int = MAX_ARTICLES) -> List[Article]:
    """Sort newest first (stable on ties) and truncate to ``limit``."""
    ordered = sorted(articles, key=lambda a: a.published_at, reverse=True)
    return ordered[: max(0, limit)]


def build_articles(
    results: Sequence[FeedResult],
    scorer: SentimentScorer,
    filter_label: str = FILTER_ALL,
    max_articles: int = MAX_ARTICLES,
    fetched_at: Optional[datetime] = None,
    include_snippet: bool = False,
) -> List[Article]:
    """Turn per-feed results into the final ranked article list."""
    fetched_at = fetched_at or datetime.now(timezone.utc)
    combined: List[Article] = []

    for result in results:
        if isinstance(result, FeedFailure):
            logger.info(
                "No items from %s: %s",
                result.source.url,
                result.reason,
                extra={"extra_fields": {"feed": result.source.url, "reason": result.reason}},
            )
            continue
        combined.extend(collect_articles(result, scorer, filter_label, fetched_at, include_snippet))

    unique = dedupe_articles(combined)
    # Configured limits above the hard cap are clamped
    ranked = rank_articles(unique, min(max_articles, MAX_ARTICLES))
    logger.info(
        "Aggregated %d articles (%d before dedupe, filter=%s)",
        len(ranked),
        len(combined),
        filter_label,
        extra={
            "extra_fields": {
                "articles": len(ranked),
                "before_dedupe": len(combined),
                "failed_feeds": sum(1 for r in results if isinstance(r, FeedFailure)),
                "filter": filter_label,
            }
        },
    )
    return ranked


def fetch_articles(
    filter_label: str = FILTER_ALL,
    sources: Optional[Sequence[FeedSource]] = None,
    client: Optional[FeedClient] = None,
    scorer: Optional[SentimentScorer] = None,
    config: Optional[Config] = None,
) -> List[Article]:
    """Fetch, normalize, filter, dedupe, sort and cap articles from all feeds.

    Args:
        filter_label: ``all``, ``positive``, ``neutral`` or ``negative``.
        sources: Feeds to read; defaults to the configured feed list.
        client: Shared feed client; built from config when omitted.
        scorer: Shared sentiment scorer; built from config when omitted.
        config: Configuration; defaults to the global config.

    Returns:
        Ranked articles, possibly empty. Never raises.
    """
    try:
        config = config or get_config()
        label = normalize_filter_label(filter_label)

        if sources is None:
            sources = load_sources(config.feeds.feeds_path)
        if not sources:
            return []

        client = client or FeedClient.from_config(config.feeds)
        scorer = scorer or SentimentScorer.from_config(config.sentiment)

        results = client.fetch_all(sources, config.feeds.fetch_delay_seconds)
        return build_articles(
            results,
            scorer,
            filter_label=label,
            max_articles=config.aggregation.max_articles,
            include_snippet=config.sentiment.include_snippet,
        )
    except Exception:
        logger.exception("Article aggregation failed")
        return []
