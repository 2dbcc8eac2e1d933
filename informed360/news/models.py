"""Records flowing through the aggregation pipeline.

``RawFeedItem`` is untrusted parser output; ``Article`` and ``Topic`` are
the canonical, immutable records handed to the dashboard. Python attributes
are snake_case, ``to_dict`` emits the camelCase JSON shapes the front end
reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SENTIMENT_LABELS: Tuple[str, ...] = ("positive", "neutral", "negative")


@dataclass(frozen=True)
class FeedSource:
    """One configured RSS/Atom origin."""

    url: str
    name: Optional[str] = None
    category: Optional[str] = None


@dataclass
class RawFeedItem:
    """Partially populated item as parsed from a feed document."""

    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    enclosure_url: Optional[str] = None
    media_content_url: Optional[str] = None
    image_url: Optional[str] = None
    content: Optional[str] = None  # content:encoded / atom:content HTML
    summary: Optional[str] = None  # description / atom:summary
    iso_date: Optional[str] = None  # dc:date, atom published/updated
    pub_date: Optional[str] = None  # RSS pubDate


@dataclass(frozen=True)
class Sentiment:
    """Polarity fractions, whole percentages and a discrete label."""

    pos: float
    neu: float
    neg: float
    compound: float
    pos_p: int
    neg_p: int
    neu_p: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pos": self.pos,
            "neu": self.neu,
            "neg": self.neg,
            "compound": self.compound,
            "posP": self.pos_p,
            "negP": self.neg_p,
            "neuP": self.neu_p,
            "label": self.label,
        }


@dataclass(frozen=True)
class Article:
    """One normalized news item."""

    title: str
    link: str
    image: str
    published_at: str  # UTC ISO-8601, seconds precision
    source: str
    category: str
    sentiment: Sentiment

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "image": self.image,
            "publishedAt": self.published_at,
            "source": self.source,
            "category": self.category,
            "sentiment": self.sentiment.to_dict(),
        }


@dataclass(frozen=True)
class TopicSentiment:
    """Summed pos/neu/neg percentages of the articles behind a topic."""

    pos: int = 0
    neu: int = 0
    neg: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"pos": self.pos, "neu": self.neu, "neg": self.neg}


@dataclass(frozen=True)
class Topic:
    """A frequent title word aggregated across articles."""

    title: str
    count: int
    sources: int
    sentiment: TopicSentiment
    sample: List[Article] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "count": self.count,
            "sources": self.sources,
            "sentiment": self.sentiment.to_dict(),
            "sample": [article.to_dict() for article in self.sample],
        }
