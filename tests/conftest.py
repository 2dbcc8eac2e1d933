"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from typing import Dict

import pytest

from informed360.config import reset_config
from informed360.logging_setup import reset_logging
from informed360.news.models import Article, Sentiment
from informed360.news.sentiment import SentimentScorer

POSITIVE_WORDS = {"surge", "surges", "win", "wins", "record", "profit", "boost"}
NEGATIVE_WORDS = {"crash", "crashes", "dies", "killed", "loss", "slump", "fraud"}


class KeywordAnalyzer:
    """Deterministic stand-in for VADER's polarity_scores."""

    def polarity_scores(self, text: str) -> Dict[str, float]:
        words = set(text.lower().replace(",", " ").split())
        pos = 0.4 if words & POSITIVE_WORDS else 0.0
        neg = 0.4 if words & NEGATIVE_WORDS else 0.0
        compound = 0.5 if pos > neg else (-0.5 if neg > pos else 0.0)
        return {"pos": pos, "neg": neg, "neu": round(1.0 - pos - neg, 3), "compound": compound}


@pytest.fixture(autouse=True)
def reset_globals() -> Generator[None, None, None]:
    """Reset global state before each test."""
    reset_config()
    reset_logging()
    yield
    reset_config()
    reset_logging()


@pytest.fixture
def scorer() -> SentimentScorer:
    """Sentiment scorer backed by the keyword analyzer."""
    return SentimentScorer(analyzer=KeywordAnalyzer())


@pytest.fixture
def make_article() -> Callable[..., Article]:
    """Factory for Articles with sensible defaults."""

    def _make(
        title: str = "Headline",
        link: str = "https://example.com/a",
        published_at: str = "2024-01-15T12:00:00+00:00",
        source: str = "example.com",
        category: str = "general",
        label: str = "neutral",
        pos_p: int = 0,
        neu_p: int = 100,
        neg_p: int = 0,
    ) -> Article:
        sentiment = Sentiment(
            pos=pos_p / 100,
            neu=neu_p / 100,
            neg=neg_p / 100,
            compound=0.0,
            pos_p=pos_p,
            neg_p=neg_p,
            neu_p=neu_p,
            label=label,
        )
        return Article(
            title=title,
            link=link,
            image="https://example.com/img.jpg",
            published_at=published_at,
            source=source,
            category=category,
            sentiment=sentiment,
        )

    return _make


def _rss_document(*items: str, title: str = "Example Feed") -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/" '
        'xmlns:content="http://purl.org/rss/1.0/modules/content/" '
        'xmlns:dc="http://purl.org/dc/elements/1.1/">'
        f"<channel><title>{title}</title>{''.join(items)}</channel></rss>"
    ).encode("utf-8")


def _rss_item(title: str, link: str, pub_date: str = "Mon, 15 Jan 2024 12:00:00 GMT") -> str:
    return f"<item><title>{title}</title><link>{link}</link><pubDate>{pub_date}</pubDate></item>"


@pytest.fixture
def rss_document() -> Callable[..., bytes]:
    """Wrap ``<item>`` fragments in an RSS 2.0 document."""
    return _rss_document


@pytest.fixture
def rss_item() -> Callable[..., str]:
    """Build a minimal RSS 2.0 ``<item>``."""
    return _rss_item
